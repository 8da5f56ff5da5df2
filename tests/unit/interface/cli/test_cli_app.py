from __future__ import annotations

"""
Unit tests for the CLI Application Controller.

Runs `main()` in-process with logging bootstrap disabled and checks the
printed output and exit codes of every sub-command.
"""

import io
import json
from pathlib import Path
from unittest.mock import patch

import pytest

from treeforge.domain.errors import RemoteRepositoryError
from treeforge.interface.cli import app

SCENARIO_D = "proj/\n    └─ a/\n        └─ b.txt"


@pytest.fixture(autouse=True)
def no_logging_bootstrap():
    with patch("treeforge.interface.cli.app.configure_logging") as mock_configure:
        yield mock_configure


@pytest.fixture
def tree_file(tmp_path: Path, canonical_text: str) -> Path:
    path = tmp_path / "tree.txt"
    path.write_text(canonical_text, encoding="utf-8")
    return path


def run(argv, capsys):
    code = app.main(["--use-defaults"] + argv)
    out, err = capsys.readouterr()
    return code, out, err

# -----------------------------------------------------------------------------
# VALIDATE / FORMAT / PREVIEW
# -----------------------------------------------------------------------------

def test_validate_valid_file(tree_file, capsys):
    """TC-01: A valid tree prints a confirmation and exits 0."""
    code, out, _ = run(["validate", str(tree_file)], capsys)

    assert code == app.EXIT_OK
    assert "Tree structure is valid." in out


def test_validate_reports_problems_as_json(tmp_path, capsys):
    """TC-02: Problems are listed in JSON form and the exit code is 1."""
    path = tmp_path / "bad.txt"
    path.write_text(SCENARIO_D, encoding="utf-8")

    code, out, _ = run(["validate", str(path), "--json"], capsys)
    payload = json.loads(out)

    assert code == app.EXIT_FAILURE
    assert payload["is_valid"] is False
    assert len(payload["errors"]) == 1
    assert "Inconsistent indentation" in payload["errors"][0]


def test_format_reads_stdin(monkeypatch, capsys, classic_text):
    """TC-03: '-' reads stdin and prints the canonical rendering."""
    monkeypatch.setattr("sys.stdin", io.StringIO(classic_text))

    code, out, _ = run(["format", "-"], capsys)

    assert code == app.EXIT_OK
    lines = out.rstrip("\n").splitlines()
    assert lines[0] == "project/"
    assert lines[1] == "├─ src/"


def test_format_empty_input(monkeypatch, capsys):
    """TC-04: Unparseable text is a bad-input error."""
    monkeypatch.setattr("sys.stdin", io.StringIO(""))

    code, _, err = run(["format"], capsys)

    assert code == app.EXIT_BAD_INPUT
    assert "ERROR: Tree structure cannot be empty" in err


def test_preview_json(tree_file, capsys):
    """TC-05: Preview prints exact stats for parseable text."""
    code, out, _ = run(["preview", str(tree_file), "--json"], capsys)
    payload = json.loads(out)

    assert code == app.EXIT_OK
    assert payload["root_name"] == "app"
    assert payload["approximated"] is False
    assert payload["stats"]["folders"] == 1
    assert payload["stats"]["files"] == 2


def test_missing_input_file(tmp_path, capsys):
    """TC-06: An unreadable input file exits 2."""
    code, _, err = run(["validate", str(tmp_path / "nope.txt")], capsys)

    assert code == app.EXIT_BAD_INPUT
    assert "Cannot read input file" in err

# -----------------------------------------------------------------------------
# BUILD
# -----------------------------------------------------------------------------

def test_build_json(tree_file, tmp_path, capsys):
    """TC-07: Build writes the project and archive into the output directory."""
    out_dir = tmp_path / "out"
    code, out, _ = run(["build", str(tree_file), "-o", str(out_dir), "--name", "demo", "--json"], capsys)
    payload = json.loads(out)

    assert code == app.EXIT_OK
    assert payload["project_name"] == "demo"
    assert payload["folders"] == 1
    assert payload["files"] == 2
    assert (out_dir / "demo" / "src" / "index.js").is_file()
    assert (out_dir / "demo.zip").is_file()


def test_build_no_archive(tree_file, tmp_path, capsys):
    """TC-08: --no-archive skips the zip."""
    out_dir = tmp_path / "out"
    code, out, _ = run(["build", str(tree_file), "-o", str(out_dir), "-n", "demo", "--no-archive"], capsys)

    assert code == app.EXIT_OK
    assert "Project created:" in out
    assert not (out_dir / "demo.zip").exists()


def test_build_invalid_name(tree_file, tmp_path, capsys):
    """TC-09: An unsafe project name exits 2 and writes nothing."""
    out_dir = tmp_path / "out"
    code, _, err = run(["build", str(tree_file), "-o", str(out_dir), "-n", "../evil"], capsys)

    assert code == app.EXIT_BAD_INPUT
    assert "Invalid project name" in err
    assert not (tmp_path / "evil").exists()

# -----------------------------------------------------------------------------
# SCAN / GITHUB
# -----------------------------------------------------------------------------

def test_scan_directory(tmp_path, capsys):
    """TC-10: Scanning prints the directory as canonical tree text."""
    root = tmp_path / "demo"
    (root / "src").mkdir(parents=True)
    (root / "src" / "main.py").write_text("")

    code, out, _ = run(["scan", str(root)], capsys)

    assert code == app.EXIT_OK
    assert out.splitlines() == ["demo/", "└─ src/", "   └─ main.py"]


def test_scan_missing_directory(tmp_path, capsys):
    """TC-11: A missing directory exits 2."""
    code, _, err = run(["scan", str(tmp_path / "ghost")], capsys)

    assert code == app.EXIT_BAD_INPUT
    assert err.startswith("ERROR:")


def test_github_listing(capsys):
    """TC-12: Remote entries are rendered under the repository name."""
    entries = [
        {"path": "src", "type": "dir", "size": 0},
        {"path": "src/a.py", "type": "file", "size": 10},
        {"path": "README.md", "type": "file", "size": 3},
    ]
    with patch("treeforge.interface.cli.app.get_default_branch", return_value="main") as mock_branch, \
            patch("treeforge.interface.cli.app.fetch_repository_entries", return_value=entries) as mock_fetch:
        code, out, _ = run(["github", "https://github.com/octo/hello.git"], capsys)

    assert code == app.EXIT_OK
    mock_branch.assert_called_once_with("octo", "hello", None)
    mock_fetch.assert_called_once_with("octo", "hello", "main", path="", token=None)
    assert out.splitlines()[0] == "hello/"
    assert "└─ src/" in out


def test_github_bad_url(capsys):
    """TC-13: A URL that is not a GitHub repository exits 2."""
    code, _, err = run(["github", "https://example.com/nothing"], capsys)
    assert code == app.EXIT_BAD_INPUT
    assert err.startswith("ERROR:")


def test_github_remote_failure(capsys):
    """TC-14: Remote errors are reported and exit 1."""
    with patch(
            "treeforge.interface.cli.app.fetch_repository_entries",
            side_effect=RemoteRepositoryError("GitHub API rate limit exceeded."),
    ):
        code, _, err = run(["github", "https://github.com/o/r", "--branch", "dev"], capsys)

    assert code == app.EXIT_FAILURE
    assert "rate limit" in err

# -----------------------------------------------------------------------------
# LIFECYCLE
# -----------------------------------------------------------------------------

def test_keyboard_interrupt(capsys):
    """TC-15: Ctrl+C maps to exit code 130."""
    def interrupted(args, cfg):
        raise KeyboardInterrupt

    with patch.dict(app._COMMANDS, {"preview": interrupted}):
        code, _, err = run(["preview"], capsys)

    assert code == app.EXIT_INTERRUPTED
    assert "Interrupted." in err


def test_debug_flag_reaches_logging(tree_file, capsys, no_logging_bootstrap):
    """TC-16: --debug configures DEBUG level logging."""
    run(["--debug", "validate", str(tree_file)], capsys)

    cfg = no_logging_bootstrap.call_args.args[0]
    assert cfg.level == "DEBUG"


def test_github_list_branches(capsys):
    """TC-17: --list-branches prints one branch per line, flagging the default."""
    branches = [{"name": "main", "is_default": True}, {"name": "dev", "is_default": False}]
    with patch("treeforge.interface.cli.app.list_branches", return_value=branches) as mock_list, \
            patch("treeforge.interface.cli.app.fetch_repository_entries") as mock_fetch:
        code, out, _ = run(["github", "https://github.com/octo/hello", "--list-branches"], capsys)

    assert code == app.EXIT_OK
    assert out.splitlines() == ["main (default)", "dev"]
    mock_list.assert_called_once_with("octo", "hello", None)
    mock_fetch.assert_not_called()


def test_github_list_branches_remote_failure(capsys):
    """TC-18: Branch listing errors exit 1."""
    with patch(
            "treeforge.interface.cli.app.list_branches",
            side_effect=RemoteRepositoryError("Repository or branch not found."),
    ):
        code, _, err = run(["github", "https://github.com/o/r", "--list-branches"], capsys)

    assert code == app.EXIT_FAILURE
    assert "not found" in err
