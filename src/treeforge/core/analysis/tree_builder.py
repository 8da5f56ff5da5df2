from __future__ import annotations

"""
Tree Builder Adapters.

Builds the node model from sources other than tree text: flat path listings
returned by a remote repository lister, and a walk of a local directory.
Also computes the shape statistics shown by structure previews, either
exactly from a model or approximately from unparseable text.
"""

import logging
import os
import re
from typing import Any, Dict, Iterable, List, Optional

from treeforge.core.analysis.filters import (
    compile_patterns,
    default_exclude_patterns,
    load_gitignore_patterns,
    matches_any,
)
from treeforge.core.analysis.line_scanner import infer_indent_unit, scan_line
from treeforge.core.analysis.normalizer import clean_tree_lines
from treeforge.domain.constants import DEFAULT_PROJECT_NAME
from treeforge.domain.tree_models import DirectoryNode, FileNode, ParsedTree, TreeStats
from treeforge.infra.fs import sanitize_name

logger = logging.getLogger(__name__)

_ROOT_GUESS_RE = re.compile(r"^[^/\s]+/\s*$")

# Estimated breadth is capped so a long flat paste does not look absurd
_APPROX_BREADTH_CAP = 20

# -----------------------------------------------------------------------------
# ENTRY LISTS
# -----------------------------------------------------------------------------

def build_tree_from_entries(entries: Iterable[Dict[str, Any]], root_name: str) -> ParsedTree:
    """
    Assemble a tree from a flat list of repository paths.

    Args:
        entries: Items shaped like {"path": "src/app.py", "type": "file" | "dir"}.
        root_name: Name given to the root directory.

    Returns:
        ParsedTree: Tree whose children follow path order.
    """
    root = DirectoryNode(sanitize_name(root_name))
    ordered = sorted(entries, key=lambda e: (str(e["path"]).lower(), str(e["path"])))

    for entry in ordered:
        parts = [sanitize_name(p) for p in str(entry["path"]).split("/") if p]
        if not parts:
            continue

        parent = root
        for part in parts[:-1]:
            child = parent.children.get(part)
            if not isinstance(child, DirectoryNode):
                child = parent.add(DirectoryNode(part))
            parent = child

        leaf = parts[-1]
        if entry.get("type") == "dir":
            if not isinstance(parent.children.get(leaf), DirectoryNode):
                parent.add(DirectoryNode(leaf))
        else:
            parent.add(FileNode(leaf))

    return ParsedTree(root_name=root.name, root=root)

# -----------------------------------------------------------------------------
# LOCAL DIRECTORIES
# -----------------------------------------------------------------------------

def scan_directory(
        path: str,
        root_name: Optional[str] = None,
        exclude_patterns: Optional[List[str]] = None,
        respect_gitignore: bool = False,
) -> ParsedTree:
    """
    Build a tree from a local directory.

    Directories are listed before files, each group sorted case-insensitively.
    Symbolic links are listed but never followed.

    Args:
        path: Directory to scan.
        root_name: Root label (defaults to the directory's base name).
        exclude_patterns: Regexes matched against entry names. None applies
                          default_exclude_patterns().
        respect_gitignore: Also exclude names matched by the top-level .gitignore.

    Returns:
        ParsedTree: Scanned structure.

    Raises:
        NotADirectoryError: If `path` is not an existing directory.
    """
    path = os.path.abspath(path)
    if not os.path.isdir(path):
        raise NotADirectoryError(f"Not a directory: {path}")

    patterns = list(exclude_patterns) if exclude_patterns is not None else default_exclude_patterns()
    if respect_gitignore:
        patterns.extend(load_gitignore_patterns(path))
    exclude_rx = compile_patterns(patterns)

    name = sanitize_name(root_name or os.path.basename(path.rstrip(os.sep)) or DEFAULT_PROJECT_NAME)
    logger.info(f"Scanning directory: {path}")

    root = DirectoryNode(name)
    _scan_into(path, root, exclude_rx)
    return ParsedTree(root_name=name, root=root)


def _scan_into(path: str, directory: DirectoryNode, exclude_rx: List[re.Pattern]) -> None:
    try:
        with os.scandir(path) as it:
            entries = sorted(
                it,
                key=lambda e: (not e.is_dir(follow_symlinks=False), e.name.lower(), e.name),
            )
    except PermissionError as e:
        logger.warning(f"Permission denied while scanning {path}: {e}")
        return

    for entry in entries:
        if matches_any(entry.name, exclude_rx):
            continue
        name = sanitize_name(entry.name)
        if entry.is_dir(follow_symlinks=False):
            child = DirectoryNode(name)
            directory.add(child)
            _scan_into(entry.path, child, exclude_rx)
        else:
            directory.add(FileNode(name))

# -----------------------------------------------------------------------------
# STATISTICS
# -----------------------------------------------------------------------------

def compute_tree_stats(root: DirectoryNode) -> TreeStats:
    """
    Count folders and files and measure the tree's shape.

    Args:
        root: Root directory (not counted itself).

    Returns:
        TreeStats: Exact statistics.
    """
    folders = files = max_depth = 0
    max_breadth = len(root)

    for parts, node in root.walk():
        if isinstance(node, DirectoryNode):
            folders += 1
            max_depth = max(max_depth, len(parts))
            max_breadth = max(max_breadth, len(node))
        else:
            files += 1

    return TreeStats(folders=folders, files=files, max_depth=max_depth, max_breadth=max_breadth)


def approximate_tree_stats(raw: Optional[str]) -> TreeStats:
    """
    Estimate statistics from text that could not be parsed.

    Lines ending with '/' count as folders, other lines as files. Depth is the
    deepest scanned level; breadth is a third of the line count, capped.

    Args:
        raw: Raw tree text.

    Returns:
        TreeStats: Approximate statistics.
    """
    lines = [line.text for line in clean_tree_lines(raw)]
    if lines and _ROOT_GUESS_RE.match(lines[0].strip()):
        lines = lines[1:]
    if not lines:
        return TreeStats()

    folders = sum(1 for line in lines if line.strip().endswith("/"))
    unit = infer_indent_unit(lines)
    depth = max(scan_line(line, unit).level for line in lines)

    return TreeStats(
        folders=folders,
        files=len(lines) - folders,
        max_depth=depth,
        max_breadth=int(min(_APPROX_BREADTH_CAP, len(lines) / 3)),
    )


def extract_root_name(raw: Optional[str]) -> str:
    """
    Best-effort root name for text that may not parse.

    Args:
        raw: Raw tree text.

    Returns:
        str: First line that looks like `name/`, else the first line without
             trailing slashes, else the default project name.
    """
    lines = [line.strip() for line in (raw or "").split("\n") if line.strip()]
    for line in lines:
        if _ROOT_GUESS_RE.match(line):
            return sanitize_name(line.split("/", 1)[0])

    if lines:
        guess = sanitize_name(lines[0].rstrip("/"))
        if guess:
            return guess
    return DEFAULT_PROJECT_NAME
