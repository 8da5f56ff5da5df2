from __future__ import annotations

"""
Integration tests for FileSystem Infrastructure.

Validates data directory resolution, path normalization, entry name safety
and the directory reset helpers used by the build pipeline.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from treeforge.infra.fs import (
    get_user_data_dir,
    is_safe_entry_name,
    is_within,
    normalize_path,
    recreate_dir,
    remove_dir_quietly,
    sanitize_name,
)

# -----------------------------------------------------------------------------
# PATH RESOLUTION TESTS
# -----------------------------------------------------------------------------

def test_get_user_data_dir_windows() -> None:
    """TC-01: Verify resolution of %LOCALAPPDATA% on Windows systems."""
    mock_appdata = "C:/Users/Test/AppData/Local"
    with patch("os.name", "nt"):
        with patch.dict(os.environ, {"LOCALAPPDATA": mock_appdata}):
            with patch("os.makedirs"):
                path = get_user_data_dir()
                assert "TreeForge" in path


def test_get_user_data_dir_unix(tmp_path: Path) -> None:
    """TC-02: Verify the hidden home folder on Unix-like systems."""
    with patch("os.name", "posix"):
        with patch("os.path.expanduser", return_value=str(tmp_path)):
            path = get_user_data_dir()

    assert path == str(tmp_path / ".treeforge")
    assert os.path.isdir(path)


def test_normalize_path_expansion(tmp_path: Path, monkeypatch) -> None:
    """TC-03: Environment variables are expanded and empty input falls back."""
    monkeypatch.setenv("TF_TEST_DIR", str(tmp_path))

    assert normalize_path("$TF_TEST_DIR/out", "/unused") == str(tmp_path / "out")
    assert normalize_path("   ", str(tmp_path)) == str(tmp_path)
    assert normalize_path(None, str(tmp_path)) == str(tmp_path)

# -----------------------------------------------------------------------------
# NAMING TESTS
# -----------------------------------------------------------------------------

@pytest.mark.parametrize("name,expected", [
    ("a<b>c", "a_b_c"),
    ('q"uote', "q_uote"),
    ("what?.txt", "what_.txt"),
    ("plain.txt", "plain.txt"),
])
def test_sanitize_name(name, expected) -> None:
    """TC-04: Non-portable characters become underscores."""
    assert sanitize_name(name) == expected


@pytest.mark.parametrize("name,safe", [
    ("demo", True),
    ("my project", True),
    ("", False),
    ("  ", False),
    (".", False),
    ("..", False),
    ("a/b", False),
    ("a\\b", False),
    ("bad:name", False),
])
def test_is_safe_entry_name(name, safe) -> None:
    """TC-05: Only single, portable path components are safe."""
    assert is_safe_entry_name(name) is safe


def test_is_within(tmp_path: Path) -> None:
    """TC-06: Containment resolves '..' segments."""
    assert is_within(str(tmp_path), str(tmp_path / "a" / "b"))
    assert is_within(str(tmp_path), str(tmp_path))
    assert not is_within(str(tmp_path / "a"), str(tmp_path / "a" / ".." / "b"))

# -----------------------------------------------------------------------------
# DIRECTORY OPERATIONS
# -----------------------------------------------------------------------------

def test_recreate_dir_wipes_content(tmp_path: Path) -> None:
    """TC-07: Existing directories and files at the path are replaced."""
    target = tmp_path / "proj"
    (target / "stale").mkdir(parents=True)
    (target / "stale" / "old.txt").write_text("old")

    assert recreate_dir(str(target)) == str(target)
    assert list(target.iterdir()) == []

    plain = tmp_path / "plain"
    plain.write_text("not a dir")
    recreate_dir(str(plain))
    assert plain.is_dir()


def test_remove_dir_quietly(tmp_path: Path) -> None:
    """TC-08: Removal never raises, even for missing paths."""
    target = tmp_path / "gone"
    (target / "x").mkdir(parents=True)

    assert remove_dir_quietly(str(target)) is True
    assert remove_dir_quietly(str(tmp_path / "never-existed")) is True
