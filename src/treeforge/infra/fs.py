from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides cross-platform path resolution, name sanitization and directory
utilities. Acts as an abstraction over the 'os' and 'shutil' modules so the
core services behave uniformly on Windows and Unix-like systems.
"""

import os
import shutil
from typing import Optional

from treeforge.domain.constants import (
    FORBIDDEN_NAME_CHARS_RE,
    FORBIDDEN_NAME_REPLACEMENT,
)

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "TreeForge"
UNIX_APP_DIR_NAME = ".treeforge"
DEFAULT_WORK_SUBDIR = "treeforge-output"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Automatically creates the hierarchy if it does not exist.
    Standards:
    - Windows: %LOCALAPPDATA%/TreeForge
    - Linux/Mac: ~/.treeforge

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    if not path:
        path = os.path.join(os.path.expanduser("~"), UNIX_APP_DIR_NAME)

    try:
        os.makedirs(path, exist_ok=True)
    except OSError:
        pass

    return os.path.abspath(path)


def get_default_work_dir() -> str:
    """Directory under the current working directory where builds land by default."""
    return os.path.abspath(DEFAULT_WORK_SUBDIR)


def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)

# -----------------------------------------------------------------------------
# NAMING AND CONTAINMENT
# -----------------------------------------------------------------------------

def sanitize_name(name: str) -> str:
    """
    Replace characters that are not portable in file names.

    Args:
        name: Raw entry label.

    Returns:
        str: Label with each of < > : " | ? * replaced by an underscore.
    """
    return FORBIDDEN_NAME_CHARS_RE.sub(FORBIDDEN_NAME_REPLACEMENT, name)


def is_safe_entry_name(name: str) -> bool:
    """True when `name` can be used as a single path component."""
    if not name or not name.strip():
        return False
    if name in (".", ".."):
        return False
    if "/" in name or "\\" in name:
        return False
    return not FORBIDDEN_NAME_CHARS_RE.search(name)


def is_within(base_dir: str, target: str) -> bool:
    """
    Check that `target` resolves inside `base_dir`.

    Args:
        base_dir: Containing directory.
        target: Candidate path.

    Returns:
        bool: True if target equals or is nested below base_dir.
    """
    base = os.path.realpath(base_dir)
    real = os.path.realpath(target)
    try:
        return os.path.commonpath([base, real]) == base
    except ValueError:
        # Different drives on Windows
        return False

# -----------------------------------------------------------------------------
# DIRECTORY OPERATIONS
# -----------------------------------------------------------------------------

def recreate_dir(path: str) -> str:
    """
    Remove `path` if it exists and create it again empty.

    Args:
        path: Directory to reset.

    Returns:
        str: Absolute path of the fresh directory.

    Raises:
        OSError: If removal or creation fails.
    """
    path = os.path.abspath(path)
    if os.path.isdir(path) and not os.path.islink(path):
        shutil.rmtree(path)
    elif os.path.lexists(path):
        os.remove(path)
    os.makedirs(path)
    return path


def remove_dir_quietly(path: str) -> bool:
    """Best-effort recursive removal. Returns True when the path is gone."""
    shutil.rmtree(path, ignore_errors=True)
    return not os.path.exists(path)
