from __future__ import annotations

"""
Tree Text Parser.

Builds the hierarchical node model from normalized tree text. Every line is
read through the shared line scanner; parent resolution uses an explicit
stack of (directory, level) pairs so that indentation jumps collapse onto
the nearest valid ancestor instead of failing.
"""

import logging
import re
from typing import List, Optional, Tuple

from treeforge.core.analysis.line_scanner import infer_indent_unit, scan_line, strip_marker_emoji
from treeforge.core.analysis.normalizer import normalize_tree_text
from treeforge.domain.errors import EmptyInputError, MissingRootError
from treeforge.domain.tree_models import DirectoryNode, FileNode, ParsedTree
from treeforge.infra.fs import sanitize_name

logger = logging.getLogger(__name__)

_ROOT_LINE_RE = re.compile(r"^([^/]+)/\s*$")

# Box-drawing glyphs some exporters leave in front of the root name
_BOX_GLYPHS = "│┃┆┇┊┋├└┣┗╠╚─━═"

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def parse_tree(normalized: Optional[str]) -> ParsedTree:
    """
    Parse normalized tree text into a ParsedTree.

    The first line must be the root directory (`name/`). Each following line
    becomes a file or directory attached to the closest preceding directory
    with a lower level. Children keep their input order; a repeated sibling
    name replaces the earlier node.

    Args:
        normalized: Output of normalize_tree_text.

    Returns:
        ParsedTree: Root name and root directory node.

    Raises:
        EmptyInputError: If no non-blank line exists.
        MissingRootError: If the first line is not a root directory.
    """
    lines = [line for line in (normalized or "").split("\n") if line.strip()]
    if not lines:
        raise EmptyInputError("Tree structure cannot be empty", line=1)

    root_name = _read_root_name(lines[0])
    root = DirectoryNode(root_name)

    body = lines[1:]
    unit = infer_indent_unit(body)
    logger.debug(f"Parsing '{root_name}' with {len(body)} entries (indent unit {unit}).")

    stack: List[Tuple[DirectoryNode, int]] = [(root, 0)]
    for line in body:
        shape = scan_line(line, unit)
        if shape.is_decorative:
            continue

        name = sanitize_name(shape.name)
        while len(stack) > 1 and stack[-1][1] >= shape.level:
            stack.pop()

        parent = stack[-1][0]
        if shape.is_directory:
            node = DirectoryNode(name)
            parent.add(node)
            stack.append((node, shape.level))
        else:
            parent.add(FileNode(name))

    return ParsedTree(root_name=root_name, root=root)


def parse_tree_text(raw: Optional[str]) -> ParsedTree:
    """Normalize raw pasted text and parse it in one step."""
    return parse_tree(normalize_tree_text(raw))

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _read_root_name(line: str) -> str:
    match = _ROOT_LINE_RE.match(line.strip())
    if not match:
        raise MissingRootError(
            f'Invalid root line "{line.strip()}": expected a folder such as "project/"',
            line=1,
        )

    name = "".join(ch for ch in match.group(1) if ch not in _BOX_GLYPHS).strip()
    name = strip_marker_emoji(name)

    name = sanitize_name(name)
    if not name:
        raise MissingRootError("Root directory name is empty", line=1)
    return name
