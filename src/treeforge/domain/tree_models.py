from __future__ import annotations

"""
Directory Tree Structure Data Models.

Provides the node types shared by the parser, renderer, builders and
materializer. Sibling order is significant: directories keep their children
in an insertion-ordered mapping and compare order-sensitively.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Tuple, Union

# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

class NodeKind(str, Enum):
    FILE = "file"
    DIRECTORY = "dir"


@dataclass(frozen=True)
class FileNode:
    """
    Represents a leaf entry (file) in the directory tree.

    Files never carry content; materialization always writes them empty.

    Attributes:
        name: Sanitized file name.
    """
    name: str

    @property
    def kind(self) -> NodeKind:
        return NodeKind.FILE

    @property
    def is_dir(self) -> bool:
        return False


@dataclass(eq=False)
class DirectoryNode:
    """
    Represents a directory entry owning an ordered child mapping.

    Insertion order is document order. Adding a child whose name already
    exists replaces the earlier node in place.

    Attributes:
        name: Sanitized directory name.
        children: Ordered mapping of child name to node.
    """
    name: str
    children: Dict[str, "TreeNode"] = field(default_factory=dict)

    @property
    def kind(self) -> NodeKind:
        return NodeKind.DIRECTORY

    @property
    def is_dir(self) -> bool:
        return True

    def add(self, node: "TreeNode") -> "TreeNode":
        """Insert or replace a child and return it."""
        self.children[node.name] = node
        return node

    def items(self) -> List[Tuple[str, "TreeNode"]]:
        return list(self.children.items())

    def walk(self) -> Iterator[Tuple[Tuple[str, ...], "TreeNode"]]:
        """Yield (relative path parts, node) pairs in depth-first document order."""
        for name, child in self.children.items():
            yield (name,), child
            if isinstance(child, DirectoryNode):
                for sub_parts, sub_node in child.walk():
                    yield (name,) + sub_parts, sub_node

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DirectoryNode):
            return NotImplemented
        return self.name == other.name and self.items() == other.items()

    def __len__(self) -> int:
        return len(self.children)


TreeNode = Union[FileNode, DirectoryNode]


@dataclass(frozen=True)
class ParsedTree:
    """
    Result of parsing a tree document.

    Attributes:
        root_name: Name of the top-level directory.
        root: Root directory node; always a directory.
    """
    root_name: str
    root: DirectoryNode

# -----------------------------------------------------------------------------
# METRICS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class TreeStats:
    """
    Shape summary of a tree used by structure previews.

    Attributes:
        folders: Number of directories below the root.
        files: Number of files.
        max_depth: Deepest directory nesting below the root.
        max_breadth: Largest sibling group.
    """
    folders: int = 0
    files: int = 0
    max_depth: int = 0
    max_breadth: int = 0
