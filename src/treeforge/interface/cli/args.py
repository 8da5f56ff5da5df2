from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema (one sub-command per workflow) and the
translation of parsed namespaces into configuration overrides.
"""

import argparse
from typing import Any, Dict, List, Optional

from treeforge.domain.constants import APP_VERSION, TREE_STYLES

STDIN_MARKER = "-"

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the treeforge CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="treeforge",
        description="Convert tree diagrams into real directory structures and back.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")

    # --- Configuration and Diagnostics ---
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write logs to this file (rotating).",
    )
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore the saved configuration and use built-in defaults.",
    )

    sub = p.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    # --- validate ---
    sp = sub.add_parser("validate", help="Check tree text and list every problem found.")
    _add_input_argument(sp)
    _add_json_flag(sp)

    # --- format ---
    sp = sub.add_parser("format", help="Re-render tree text in a canonical style.")
    _add_input_argument(sp)
    _add_style_option(sp)

    # --- preview ---
    sp = sub.add_parser("preview", help="Show the root name and counts without writing anything.")
    _add_input_argument(sp)
    _add_json_flag(sp)

    # --- build ---
    sp = sub.add_parser("build", help="Create the described directory structure and zip it.")
    _add_input_argument(sp)
    sp.add_argument("-n", "--name", dest="project_name", default=None, help="Project directory name.")
    sp.add_argument("-o", "--output", dest="output_dir", default=None, help="Work directory for outputs.")
    sp.add_argument("--no-archive", action="store_true", help="Skip writing the zip archive.")
    sp.add_argument(
        "--no-organize",
        action="store_true",
        help="Do not move loose files into category folders after a fallback build.",
    )
    _add_json_flag(sp)

    # --- scan ---
    sp = sub.add_parser("scan", help="Print the tree of a local directory.")
    sp.add_argument("directory", help="Directory to scan.")
    sp.add_argument("--root-name", dest="root_name", default=None, help="Label for the root line.")
    sp.add_argument(
        "--exclude",
        dest="exclude_patterns",
        default=None,
        help="Comma-separated regexes matched against entry names.",
    )
    sp.add_argument(
        "--gitignore",
        dest="respect_gitignore",
        action="store_true",
        help="Also skip names listed in the directory's .gitignore.",
    )
    _add_style_option(sp)

    # --- github ---
    sp = sub.add_parser("github", help="Print the tree of a GitHub repository.")
    sp.add_argument("url", help="Repository URL, e.g. https://github.com/owner/repo.")
    sp.add_argument("--branch", default=None, help="Branch, tag or commit (default branch if omitted).")
    sp.add_argument("--path", dest="repo_path", default="", help="Only list this sub-directory.")
    sp.add_argument(
        "--list-branches",
        dest="list_branches",
        action="store_true",
        help="Print the repository branches instead of its tree.",
    )
    _add_style_option(sp)

    return p


def _add_input_argument(sp: argparse.ArgumentParser) -> None:
    sp.add_argument(
        "input_file",
        nargs="?",
        default=STDIN_MARKER,
        help="File holding the tree text ('-' or omitted reads stdin).",
    )


def _add_json_flag(sp: argparse.ArgumentParser) -> None:
    sp.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print machine-readable JSON.",
    )


def _add_style_option(sp: argparse.ArgumentParser) -> None:
    sp.add_argument(
        "--style",
        dest="tree_style",
        choices=sorted(TREE_STYLES),
        default=None,
        help="Connector style of the rendered tree.",
    )

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Options that were not given map to None and are ignored when merging.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {}

    overrides["output_dir"] = getattr(args, "output_dir", None)
    overrides["project_name"] = getattr(args, "project_name", None)
    overrides["tree_style"] = getattr(args, "tree_style", None)
    overrides["exclude_patterns"] = _split_csv(getattr(args, "exclude_patterns", None))

    if getattr(args, "no_archive", False):
        overrides["create_archive"] = False
    if getattr(args, "no_organize", False):
        overrides["organize_fallback"] = False
    if getattr(args, "respect_gitignore", False):
        overrides["respect_gitignore"] = True
    if getattr(args, "debug", False):
        overrides["log_level"] = "DEBUG"

    return overrides

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _split_csv(value: Optional[str]) -> Optional[List[str]]:
    """Convert a comma-separated string into a list of non-empty items."""
    if value is None:
        return None
    parts = [x.strip() for x in value.split(",")]
    return [x for x in parts if x]
