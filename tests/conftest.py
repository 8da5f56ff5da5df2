from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Isolation of the user data directory and token environment.
3. Shared tree-text samples used across unit and integration tests.
"""

import os
import sys
from pathlib import Path

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


# -----------------------------------------------------------------------------
# Environment Isolation
# -----------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def isolated_home(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the user data directory at a throwaway location for every test."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.setenv("LOCALAPPDATA", str(home))
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    return home


# -----------------------------------------------------------------------------
# Shared Samples
# -----------------------------------------------------------------------------
CANONICAL_SAMPLE = "app/\n├─ src/\n│  └─ index.js\n└─ README.md"

CLASSIC_SAMPLE = (
    "project/\n"
    "├── src/\n"
    "│   ├── main.py\n"
    "│   └── utils/\n"
    "│       └── helpers.py\n"
    "├── tests/\n"
    "│   └── test_main.py\n"
    "└── README.md"
)

FENCED_SAMPLE = "# comment\n```\nmy-proj/\n  src/\n    a.js\n  b.js\n```"


@pytest.fixture
def canonical_text() -> str:
    return CANONICAL_SAMPLE


@pytest.fixture
def classic_text() -> str:
    return CLASSIC_SAMPLE


@pytest.fixture
def fenced_text() -> str:
    return FENCED_SAMPLE
