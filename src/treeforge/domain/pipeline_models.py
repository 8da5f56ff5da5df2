from __future__ import annotations

"""
Pipeline Domain Data Models.

Defines the result objects exchanged between the core services and the
interface layer: validator reports, materialization summaries, and the
outcome of a full structure build or preview.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from treeforge.domain.errors import MaterializationIOError, TreeStructureError
from treeforge.domain.tree_models import TreeStats

# -----------------------------------------------------------------------------
# VALIDATION
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ValidationReport:
    """
    Outcome of linting a tree document.

    Attributes:
        diagnostics: Typed findings in document order.
    """
    diagnostics: List[TreeStructureError] = field(default_factory=list)

    @property
    def errors(self) -> List[str]:
        return [str(d) for d in self.diagnostics]

    @property
    def is_valid(self) -> bool:
        return not self.diagnostics

    def as_dict(self) -> Dict[str, Any]:
        return {"is_valid": self.is_valid, "errors": self.errors}

# -----------------------------------------------------------------------------
# MATERIALIZATION
# -----------------------------------------------------------------------------

@dataclass
class MaterializationReport:
    """
    Running summary of a materialization pass.

    Attributes:
        destination: Directory the items were created under.
        attempted: Number of entries the pass tried to create.
        created_dirs: Relative paths of directories created.
        created_files: Relative paths of files written.
        skipped: Per-item failures that were logged and skipped.
        moved: Files relocated by the common-folder organizer.
    """
    destination: str
    attempted: int = 0
    created_dirs: List[str] = field(default_factory=list)
    created_files: List[str] = field(default_factory=list)
    skipped: List[MaterializationIOError] = field(default_factory=list)
    moved: List[str] = field(default_factory=list)

    @property
    def created_count(self) -> int:
        return len(self.created_dirs) + len(self.created_files)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

# -----------------------------------------------------------------------------
# BUILD AND PREVIEW
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class BuildResult:
    """
    Outcome of turning tree text into a directory (and archive).

    Attributes:
        project_name: Name of the generated project directory.
        project_dir: Absolute path of the materialized directory.
        archive_path: Absolute path of the zip archive, empty if not created.
        root_name: Root name read from the tree, empty when the fallback ran.
        used_fallback: Whether strict parsing failed and the heuristic ran.
        fallback_reason: Parse error message that triggered the fallback.
        folders: Number of directories created.
        files: Number of files created.
        skipped: Number of items that failed and were skipped.
        moved: Files relocated by the common-folder organizer.
    """
    project_name: str
    project_dir: str
    archive_path: str = ""
    root_name: str = ""
    used_fallback: bool = False
    fallback_reason: str = ""
    folders: int = 0
    files: int = 0
    skipped: int = 0
    moved: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class PreviewResult:
    """
    Structure summary computed without touching the filesystem.

    Attributes:
        root_name: Root directory name (best guess when approximated).
        stats: Folder/file counts and shape metrics.
        approximated: True when parsing failed and stats were estimated.
        message: Parse error message when approximated.
    """
    root_name: str
    stats: TreeStats
    approximated: bool = False
    message: Optional[str] = None
