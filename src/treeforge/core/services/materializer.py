from __future__ import annotations

"""
Structure Materializer.

Writes a parsed tree to disk as real directories and empty files. Failures
are isolated per item: the failing entry and its subtree are skipped and
summarized in the report while siblings continue.

Also hosts the fallback used when tree text cannot be parsed at all: every
line that looks like a tree entry is created flat under the destination,
optionally followed by a best-effort pass that tidies loose files into
existing category folders.
"""

import logging
import os
import shutil
from typing import List, Optional

from treeforge.core.analysis.line_scanner import infer_indent_unit, scan_line
from treeforge.core.analysis.normalizer import clean_tree_lines
from treeforge.domain.constants import (
    BRANCH_CONNECTOR_RE,
    COMMON_FOLDER_KEYWORDS,
    VERTICAL_GLYPHS,
)
from treeforge.domain.errors import MaterializationIOError
from treeforge.domain.pipeline_models import MaterializationReport
from treeforge.domain.tree_models import DirectoryNode
from treeforge.infra.fs import is_safe_entry_name, is_within, sanitize_name

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# STRICT MATERIALIZATION
# -----------------------------------------------------------------------------

def materialize_tree(root: DirectoryNode, destination_dir: str) -> MaterializationReport:
    """
    Create the children of `root` under `destination_dir`.

    Directories are created with exist-ok semantics; files are always
    (re)written empty. The root itself maps to `destination_dir`.

    Args:
        root: Root directory node of a parsed tree.
        destination_dir: Existing directory that receives the structure.

    Returns:
        MaterializationReport: Created paths and skipped failures.
    """
    destination_dir = os.path.abspath(destination_dir)
    report = MaterializationReport(destination=destination_dir)
    _materialize_children(root, destination_dir, [], report)

    logger.info(
        f"Materialized {report.created_count} item(s) under {destination_dir} "
        f"({report.skipped_count} skipped)."
    )
    return report


def _materialize_children(
        directory: DirectoryNode,
        destination_dir: str,
        parts: List[str],
        report: MaterializationReport,
) -> None:
    for name, node in directory.items():
        rel_parts = parts + [name]
        rel_path = "/".join(rel_parts)
        target = os.path.join(destination_dir, *rel_parts)
        report.attempted += 1

        try:
            _create_entry(name, target, destination_dir, node.is_dir)
        except MaterializationIOError as e:
            logger.warning(f"Skipping '{rel_path}': {e}")
            report.skipped.append(e)
            continue

        if isinstance(node, DirectoryNode):
            report.created_dirs.append(rel_path)
            _materialize_children(node, destination_dir, rel_parts, report)
        else:
            report.created_files.append(rel_path)

# -----------------------------------------------------------------------------
# FALLBACK MATERIALIZATION
# -----------------------------------------------------------------------------

def materialize_fallback(
        raw: Optional[str],
        destination_dir: str,
        organize: bool = True,
) -> MaterializationReport:
    """
    Create every entry-looking line of unparseable text flat under a directory.

    A line is an entry when, after leading whitespace, it starts with a
    vertical bar or a branch connector. Nesting is not reproduced; the
    approximate depth (number of vertical bars) is only logged.

    Args:
        raw: Raw tree text.
        destination_dir: Existing directory that receives the entries.
        organize: Run organize_common_folders afterwards.

    Returns:
        MaterializationReport: `attempted` is the number of usable lines.
    """
    destination_dir = os.path.abspath(destination_dir)
    report = MaterializationReport(destination=destination_dir)

    candidates = [line for line in clean_tree_lines(raw) if _looks_like_entry(line.text)]
    unit = infer_indent_unit(line.text for line in candidates)

    for line in candidates:
        shape = scan_line(line.text, unit)
        if shape.is_decorative:
            continue

        name = sanitize_name(shape.name)
        report.attempted += 1
        logger.debug(f"Fallback entry '{name}' at depth {shape.vertical_bars} (line {line.number})")

        target = os.path.join(destination_dir, name)
        try:
            _create_entry(name, target, destination_dir, shape.is_directory)
        except MaterializationIOError as e:
            logger.warning(f"Skipping line {line.number}: {e}")
            report.skipped.append(e)
            continue

        if shape.is_directory:
            report.created_dirs.append(name)
        else:
            report.created_files.append(name)

    logger.info(f"Fallback created {report.created_count} of {report.attempted} entries.")

    if organize and report.attempted > 0:
        report.moved.extend(organize_common_folders(destination_dir))

    return report


def organize_common_folders(destination_dir: str) -> List[str]:
    """
    Move loose top-level files into matching category folders.

    Best-effort: a file moves only when its lower-cased name contains a
    category keyword, the category folder already exists at the top level,
    and no entry of the same name is already inside it.

    Args:
        destination_dir: Directory to tidy.

    Returns:
        List[str]: Moves performed, as "name -> folder/name".
    """
    moves: List[str] = []
    try:
        names = sorted(os.listdir(destination_dir))
    except OSError as e:
        logger.warning(f"Cannot organize {destination_dir}: {e}")
        return moves

    for name in names:
        source = os.path.join(destination_dir, name)
        if not os.path.isfile(source):
            continue

        lowered = name.lower()
        for keyword, folder in COMMON_FOLDER_KEYWORDS.items():
            if keyword not in lowered:
                continue
            folder_path = os.path.join(destination_dir, folder)
            target = os.path.join(folder_path, name)
            if not os.path.isdir(folder_path) or os.path.lexists(target):
                continue
            try:
                shutil.move(source, target)
            except OSError as e:
                logger.warning(f"Could not move '{name}' into '{folder}': {e}")
                break
            moves.append(f"{name} -> {folder}/{name}")
            logger.debug(f"Organized '{name}' into '{folder}/'")
            break

    return moves

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _looks_like_entry(text: str) -> bool:
    stripped = text.lstrip()
    if not stripped:
        return False
    return stripped[0] in VERTICAL_GLYPHS or BRANCH_CONNECTOR_RE.match(stripped) is not None


def _create_entry(name: str, target: str, destination_dir: str, is_dir: bool) -> None:
    """
    Create one directory or empty file.

    A path-style label such as `src/components/Button.jsx` is created with
    its intermediate directories; every segment must be a safe name.

    Raises:
        MaterializationIOError: On unsafe names, escaping paths or OS errors.
    """
    if not all(is_safe_entry_name(segment) for segment in name.split("/")):
        raise MaterializationIOError(f"Unsafe entry name '{name}'", path=target)
    if not is_within(destination_dir, target):
        raise MaterializationIOError(f"Path escapes destination: {target}", path=target)

    try:
        if is_dir:
            os.makedirs(target, exist_ok=True)
        else:
            os.makedirs(os.path.dirname(target), exist_ok=True)
            with open(target, "w", encoding="utf-8"):
                pass
    except OSError as e:
        raise MaterializationIOError(f"Cannot create {target}: {e}", path=target) from e
