from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration resolution
(defaults, persistent storage and command-line overrides), dispatch to the
sub-command handlers, and mapping of domain errors onto exit codes.
"""

import argparse
import json
import os
import sys
from dataclasses import asdict
from typing import Any, Callable, Dict, List, Optional

from treeforge.core.analysis.tree_builder import build_tree_from_entries, scan_directory
from treeforge.core.analysis.tree_renderer import format_tree
from treeforge.core.analysis.tree_validator import validate_tree_text
from treeforge.core.pipeline.engine import build_structure, preview_structure, render_canonical
from treeforge.domain.config import get_default_config, load_config, validate_config
from treeforge.domain.errors import RemoteRepositoryError, TreeStructureError
from treeforge.domain.pipeline_models import BuildResult, PreviewResult
from treeforge.infra.fs import normalize_path
from treeforge.infra.logging import LoggingConfig, configure_logging, get_logger
from treeforge.infra.network import (
    fetch_repository_entries,
    get_default_branch,
    list_branches,
    parse_repository_url,
)
from treeforge.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_BAD_INPUT = 2
EXIT_INTERRUPTED = 130


class InputReadError(Exception):
    """The tree text file could not be read."""

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code.
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Resolve configuration (defaults vs persistent state, then overrides)
    base_conf = get_default_config() if args.use_defaults else load_config()
    raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))
    cfg, warnings = validate_config(raw_conf)

    # 3. Logging bootstrap (console on stderr, optional rotating file)
    configure_logging(LoggingConfig(level=cfg["log_level"], console=True, log_file=args.log_file))
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    logger.debug(f"Running command '{args.command}'")

    # 4. Dispatch
    handler = _COMMANDS[args.command]
    try:
        return handler(args, cfg)
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        return EXIT_INTERRUPTED
    except InputReadError as e:
        return _fail(str(e), EXIT_BAD_INPUT)

# -----------------------------------------------------------------------------
# COMMAND HANDLERS
# -----------------------------------------------------------------------------

def _cmd_validate(args: argparse.Namespace, cfg: Dict[str, Any]) -> int:
    report = validate_tree_text(_read_input(args.input_file))

    if args.json_output:
        print(json.dumps(report.as_dict(), ensure_ascii=False, indent=2))
    elif report.is_valid:
        print("Tree structure is valid.")
    else:
        print(f"Found {len(report.errors)} problem(s):")
        for error in report.errors:
            print(f"  - {error}")

    return EXIT_OK if report.is_valid else EXIT_FAILURE


def _cmd_format(args: argparse.Namespace, cfg: Dict[str, Any]) -> int:
    text = _read_input(args.input_file)
    try:
        print(render_canonical(text, cfg["tree_style"]))
    except TreeStructureError as e:
        return _fail(str(e), EXIT_BAD_INPUT)
    return EXIT_OK


def _cmd_preview(args: argparse.Namespace, cfg: Dict[str, Any]) -> int:
    result = preview_structure(_read_input(args.input_file))

    if args.json_output:
        print(json.dumps(asdict(result), ensure_ascii=False, indent=2))
    else:
        _print_preview(result)
    return EXIT_OK


def _cmd_build(args: argparse.Namespace, cfg: Dict[str, Any]) -> int:
    text = _read_input(args.input_file)
    work_dir = normalize_path(cfg["output_dir"], os.getcwd())

    try:
        result = build_structure(
            text,
            cfg["project_name"],
            work_dir,
            organize=cfg["organize_fallback"],
            create_archive=cfg["create_archive"],
        )
    except TreeStructureError as e:
        return _fail(str(e), EXIT_BAD_INPUT)
    except OSError as e:
        logger.error(f"Build failed: {e}", exc_info=True)
        return _fail(f"Build failed: {e}", EXIT_FAILURE)

    if args.json_output:
        print(json.dumps(asdict(result), ensure_ascii=False, indent=2))
    else:
        _print_build(result)
    return EXIT_OK


def _cmd_scan(args: argparse.Namespace, cfg: Dict[str, Any]) -> int:
    directory = normalize_path(args.directory, os.getcwd())
    try:
        parsed = scan_directory(
            directory,
            root_name=args.root_name,
            exclude_patterns=cfg["exclude_patterns"] or None,
            respect_gitignore=cfg["respect_gitignore"],
        )
    except NotADirectoryError as e:
        return _fail(str(e), EXIT_BAD_INPUT)

    print(format_tree(parsed.root_name, parsed.root, cfg["tree_style"]))
    return EXIT_OK


def _cmd_github(args: argparse.Namespace, cfg: Dict[str, Any]) -> int:
    try:
        owner, repo = parse_repository_url(args.url)
    except ValueError as e:
        return _fail(str(e), EXIT_BAD_INPUT)

    token = cfg["github_token"] or None
    if args.list_branches:
        try:
            branches = list_branches(owner, repo, token)
        except RemoteRepositoryError as e:
            return _fail(str(e), EXIT_FAILURE)
        for branch in branches:
            marker = " (default)" if branch["is_default"] else ""
            print(f"{branch['name']}{marker}")
        return EXIT_OK

    repo_path = args.repo_path.strip("/")
    try:
        ref = args.branch or get_default_branch(owner, repo, token)
        entries = fetch_repository_entries(owner, repo, ref, path=repo_path, token=token)
    except RemoteRepositoryError as e:
        return _fail(str(e), EXIT_FAILURE)

    root_name = repo_path.rsplit("/", 1)[-1] if repo_path else repo
    parsed = build_tree_from_entries(entries, root_name)
    print(format_tree(parsed.root_name, parsed.root, cfg["tree_style"]))
    return EXIT_OK


_COMMANDS: Dict[str, Callable[[argparse.Namespace, Dict[str, Any]], int]] = {
    "validate": _cmd_validate,
    "format": _cmd_format,
    "preview": _cmd_preview,
    "build": _cmd_build,
    "scan": _cmd_scan,
    "github": _cmd_github,
}

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow-merge non-None override values into the base configuration.

    Only known configuration keys are merged.

    Args:
        base: The primary configuration dictionary.
        overrides: New values to inject.

    Returns:
        Dict[str, Any]: The merged configuration state.
    """
    out = dict(base)
    for k in get_default_config():
        if k in overrides and overrides[k] is not None:
            out[k] = overrides[k]
    return out

# -----------------------------------------------------------------------------
# INPUT AND VIEW RENDERING
# -----------------------------------------------------------------------------

def _read_input(source: Optional[str]) -> str:
    """Read tree text from a file path, or from stdin for '-'."""
    if not source or source == cli_args.STDIN_MARKER:
        return sys.stdin.read()
    try:
        with open(source, "r", encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise InputReadError(f"Cannot read input file '{source}': {e}") from e


def _fail(message: str, code: int) -> int:
    logger.debug(f"Exiting with code {code}: {message}")
    print(f"ERROR: {message}", file=sys.stderr)
    return code


def _print_preview(result: PreviewResult) -> None:
    stats = result.stats
    print(f"Root: {result.root_name}/")
    print(f"Folders: {stats.folders}")
    print(f"Files: {stats.files}")
    print(f"Max depth: {stats.max_depth}")
    print(f"Max breadth: {stats.max_breadth}")
    if result.approximated:
        print(f"(approximated: {result.message})")


def _print_build(result: BuildResult) -> None:
    print(f"Project created: {result.project_dir}")
    if result.archive_path:
        print(f"Archive: {result.archive_path}")
    print(f"Folders: {result.folders}  Files: {result.files}  Skipped: {result.skipped}")
    if result.used_fallback:
        print(f"Fallback used: {result.fallback_reason}")
        for move in result.moved:
            print(f"  moved {move}")

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
