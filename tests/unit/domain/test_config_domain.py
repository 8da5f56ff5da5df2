from __future__ import annotations

"""
Unit tests for the Config Domain.

Verifies:
1. Default configuration generation.
2. Resilience against corrupted config files.
3. Persistence (Save/Load) without touching real user data.
4. Type coercion performed by validate_config.
"""

import json
from unittest.mock import patch

import pytest

from treeforge.domain.config import (
    get_config_path,
    get_default_config,
    load_config,
    save_config,
    validate_config,
)
from treeforge.domain.constants import CURRENT_CONFIG_VERSION


@pytest.fixture
def mock_user_data_dir(tmp_path):
    """
    Fixture to mock the user data directory.
    Prevents tests from reading/writing to the real OS user folder.
    """
    config_dir = tmp_path / "TreeForge"
    config_dir.mkdir()

    with patch("treeforge.domain.config.get_user_data_dir", return_value=str(config_dir)):
        yield config_dir

# -----------------------------------------------------------------------------
# DEFAULTS AND PERSISTENCE
# -----------------------------------------------------------------------------

def test_default_config_integrity() -> None:
    """TC-01: Defaults are already valid and produce no warnings."""
    defaults = get_default_config()
    cfg, warnings = validate_config(defaults)

    assert warnings == []
    assert cfg == defaults
    assert defaults["tree_style"] == "canonical"
    assert defaults["create_archive"] is True


def test_load_missing_file_returns_defaults(mock_user_data_dir) -> None:
    """TC-02: No file on disk means pure defaults."""
    assert load_config() == get_default_config()


def test_save_and_load_round_trip(mock_user_data_dir) -> None:
    """TC-03: Saved values come back; the schema version is stored but not exposed."""
    cfg = get_default_config()
    cfg["project_name"] = "demo"
    cfg["tree_style"] = "classic"

    assert save_config(cfg) is True

    with open(get_config_path(), "r", encoding="utf-8") as f:
        stored = json.load(f)
    assert stored["version"] == CURRENT_CONFIG_VERSION

    loaded = load_config()
    assert "version" not in loaded
    assert loaded["project_name"] == "demo"
    assert loaded["tree_style"] == "classic"


def test_corrupted_file_falls_back(mock_user_data_dir) -> None:
    """TC-04: Invalid JSON or a non-object payload never crashes loading."""
    path = mock_user_data_dir / "config.json"

    path.write_text("{ not json", encoding="utf-8")
    assert load_config() == get_default_config()

    path.write_text("[1, 2, 3]", encoding="utf-8")
    assert load_config() == get_default_config()


def test_env_token_overrides_stored_token(mock_user_data_dir, monkeypatch) -> None:
    """TC-05: GITHUB_TOKEN wins over the persisted token."""
    cfg = get_default_config()
    cfg["github_token"] = "stored"
    save_config(cfg)

    monkeypatch.setenv("GITHUB_TOKEN", "from-env")
    assert load_config()["github_token"] == "from-env"

# -----------------------------------------------------------------------------
# VALIDATION
# -----------------------------------------------------------------------------

def test_validate_coerces_values() -> None:
    """TC-06: Keywords, CSV strings and lower-case levels are normalized."""
    cfg, warnings = validate_config({
        "create_archive": "no",
        "respect_gitignore": 1,
        "exclude_patterns": "a, b",
        "log_level": "debug",
    })

    assert cfg["create_archive"] is False
    assert cfg["respect_gitignore"] is True
    assert cfg["exclude_patterns"] == ["a", "b"]
    assert cfg["log_level"] == "DEBUG"
    assert len(warnings) == 3


def test_validate_unknown_style_and_level() -> None:
    """TC-07: Unsupported enumerations revert to defaults with a warning."""
    cfg, warnings = validate_config({"tree_style": "fancy", "log_level": "LOUD"})

    assert cfg["tree_style"] == "canonical"
    assert cfg["log_level"] == "INFO"
    assert any("fancy" in w for w in warnings)
    assert any("LOUD" in w for w in warnings)


def test_validate_wrong_types() -> None:
    """TC-08: Wrong types fall back per field; list items are filtered."""
    cfg, warnings = validate_config({
        "project_name": 42,
        "organize_fallback": "maybe",
        "exclude_patterns": ["ok", 3, "  "],
    })

    assert cfg["project_name"] == "project"
    assert cfg["organize_fallback"] is True
    assert cfg["exclude_patterns"] == ["ok"]
    assert len(warnings) == 3


@pytest.mark.parametrize("raw", [None, "text", 5, ["list"]])
def test_validate_non_dict_input(raw) -> None:
    """TC-09: Non-dict payloads yield defaults and a single warning."""
    cfg, warnings = validate_config(raw)

    assert cfg == get_default_config()
    assert len(warnings) == 1
