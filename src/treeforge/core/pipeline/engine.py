from __future__ import annotations

"""
Core orchestration pipeline.

This module coordinates the structure workflows:
1. Validates the requested project name.
2. Prepares a fresh project directory inside the caller's work directory.
3. Normalizes and parses the tree text (falling back to the heuristic
   materializer when the text has no usable root).
4. Materializes the structure on disk.
5. Packs the project directory into a zip archive.

It also exposes the read-only previews used before a build.
"""

import logging
import os
from typing import Optional

from treeforge.core.analysis.normalizer import normalize_tree_text
from treeforge.core.analysis.tree_builder import (
    approximate_tree_stats,
    compute_tree_stats,
    extract_root_name,
)
from treeforge.core.analysis.tree_parser import parse_tree, parse_tree_text
from treeforge.core.analysis.tree_renderer import format_tree
from treeforge.core.services.archiver import write_archive
from treeforge.core.services.materializer import materialize_fallback, materialize_tree
from treeforge.domain.constants import DEFAULT_TREE_STYLE
from treeforge.domain.errors import (
    EmptyInputError,
    InvalidProjectNameError,
    MissingRootError,
    TreeStructureError,
)
from treeforge.domain.pipeline_models import BuildResult, PreviewResult
from treeforge.infra.fs import is_safe_entry_name, recreate_dir, remove_dir_quietly

logger = logging.getLogger(__name__)


def build_structure(
        tree_text: Optional[str],
        project_name: str,
        work_dir: str,
        *,
        organize: bool = True,
        create_archive: bool = True,
) -> BuildResult:
    """
    Turn tree text into a directory and (optionally) a zip archive.

    The project directory `work_dir/project_name` is recreated from scratch.
    The work directory itself belongs to the caller and is never removed.

    Args:
        tree_text: Raw tree text as pasted by the user.
        project_name: Name of the generated project directory and archive.
        work_dir: Existing or creatable directory receiving the outputs.
        organize: Let the fallback tidy loose files into category folders.
        create_archive: Write `work_dir/<project_name>.zip`.

    Returns:
        BuildResult: Paths and counts of the generated structure.

    Raises:
        InvalidProjectNameError: If the project name is unsafe.
        EmptyInputError: If the text is empty and the fallback found nothing.
        MissingRootError: If the text has no root and the fallback found nothing.
        OSError: If the project directory or archive cannot be written.
    """
    # -------------------------------------------------------------------------
    # 1) Project Name Validation
    # -------------------------------------------------------------------------
    name = (project_name or "").strip()
    if not is_safe_entry_name(name):
        raise InvalidProjectNameError(
            f"Invalid project name '{project_name}': use a plain folder name without "
            f"path separators or any of < > : \" | ? *"
        )

    logger.info(f"Building project '{name}' in {work_dir}")

    # -------------------------------------------------------------------------
    # 2) Directory Preparation
    # -------------------------------------------------------------------------
    work_dir = os.path.abspath(work_dir)
    os.makedirs(work_dir, exist_ok=True)
    project_dir = recreate_dir(os.path.join(work_dir, name))

    try:
        # ---------------------------------------------------------------------
        # 3) Parse and Materialize
        # ---------------------------------------------------------------------
        root_name = ""
        fallback_reason = ""
        try:
            parsed = parse_tree(normalize_tree_text(tree_text))
        except (EmptyInputError, MissingRootError) as e:
            logger.warning(f"Strict parsing failed ({e}). Switching to fallback materialization.")
            report = materialize_fallback(tree_text, project_dir, organize=organize)
            if report.attempted == 0:
                logger.error("Fallback found no usable lines.")
                raise
            fallback_reason = str(e)
        else:
            root_name = parsed.root_name
            report = materialize_tree(parsed.root, project_dir)

        # ---------------------------------------------------------------------
        # 4) Archive
        # ---------------------------------------------------------------------
        archive_path = ""
        if create_archive:
            archive_path = write_archive(project_dir, os.path.join(work_dir, f"{name}.zip"))

    except Exception:
        logger.debug(f"Build failed. Removing {project_dir}")
        remove_dir_quietly(project_dir)
        raise

    logger.info(
        f"Build finished: {len(report.created_dirs)} folder(s), "
        f"{len(report.created_files)} file(s), {report.skipped_count} skipped."
    )

    return BuildResult(
        project_name=name,
        project_dir=project_dir,
        archive_path=archive_path,
        root_name=root_name,
        used_fallback=bool(fallback_reason),
        fallback_reason=fallback_reason,
        folders=len(report.created_dirs),
        files=len(report.created_files),
        skipped=report.skipped_count,
        moved=list(report.moved),
    )


def preview_structure(tree_text: Optional[str]) -> PreviewResult:
    """
    Summarize the structure tree text describes, without touching the disk.

    Args:
        tree_text: Raw tree text.

    Returns:
        PreviewResult: Exact stats, or approximate stats with the parse error
                       message when the text does not parse.
    """
    try:
        parsed = parse_tree_text(tree_text)
    except TreeStructureError as e:
        logger.debug(f"Preview falling back to approximation: {e}")
        return PreviewResult(
            root_name=extract_root_name(tree_text),
            stats=approximate_tree_stats(tree_text),
            approximated=True,
            message=str(e),
        )

    return PreviewResult(root_name=parsed.root_name, stats=compute_tree_stats(parsed.root))


def render_canonical(tree_text: Optional[str], style: str = DEFAULT_TREE_STYLE) -> str:
    """
    Re-render tree text in a canonical connector style.

    Raises:
        EmptyInputError: If no usable content exists.
        MissingRootError: If no root line can be read.
        ValueError: If the style is unknown.
    """
    parsed = parse_tree_text(tree_text)
    return format_tree(parsed.root_name, parsed.root, style)
