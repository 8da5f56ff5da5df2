from __future__ import annotations

"""
Configuration Domain Management.

Handles persistent storage of user preferences using JSON in the user data
directory, and normalizes untrusted configuration dictionaries (from disk or
CLI overrides) into strictly typed values.
"""

import json
import logging
import os
from typing import Any, Dict, List, Tuple

from treeforge.domain.constants import (
    CURRENT_CONFIG_VERSION,
    DEFAULT_PROJECT_NAME,
    DEFAULT_TREE_STYLE,
    TREE_STYLES,
)
from treeforge.infra.fs import get_default_work_dir, get_user_data_dir

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"
GITHUB_TOKEN_ENV = "GITHUB_TOKEN"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def get_config_path() -> str:
    """Absolute path of the persisted configuration file."""
    return os.path.join(get_user_data_dir(), CONFIG_FILE_NAME)

# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------

def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Build
        "output_dir": get_default_work_dir(),
        "project_name": DEFAULT_PROJECT_NAME,
        "organize_fallback": True,
        "create_archive": True,

        # Rendering
        "tree_style": DEFAULT_TREE_STYLE,

        # Local scanning
        "exclude_patterns": [],
        "respect_gitignore": False,

        # Remote
        "github_token": "",

        # Diagnostics
        "log_level": "INFO",
    }

# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------

def load_config() -> Dict[str, Any]:
    """
    Load the persisted configuration merged over the defaults.

    The GITHUB_TOKEN environment variable, when set, overrides the stored token.

    Returns:
        Dict[str, Any]: Configuration (defaults on a missing or corrupted file).
    """
    config = get_default_config()
    path = get_config_path()

    if os.path.exists(path):
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if isinstance(data, dict):
                data.pop("version", None)
                config.update(data)
            else:
                logger.warning("Corrupted config file. Using defaults.")
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load config: {e}. Using defaults.")
    else:
        logger.debug("Config file not found. Using defaults.")

    env_token = os.environ.get(GITHUB_TOKEN_ENV, "").strip()
    if env_token:
        config["github_token"] = env_token

    return config


def save_config(config: Dict[str, Any]) -> bool:
    """
    Persist configuration to disk.

    Args:
        config: Configuration dictionary to save.

    Returns:
        bool: True on success.
    """
    path = get_config_path()
    state = dict(config)
    state["version"] = CURRENT_CONFIG_VERSION
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(state, f, ensure_ascii=False, indent=4)
        logger.debug(f"Configuration saved to {path}")
        return True
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")
        return False

# -----------------------------------------------------------------------------
# Validation
# -----------------------------------------------------------------------------

def validate_config(config: Any) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize a configuration dictionary.

    Converts untrusted input (JSON file, CLI overrides) into typed values and
    fills missing keys with defaults. Never raises; problems become warnings.

    Args:
        config: Raw configuration data.

    Returns:
        Tuple[Dict[str, Any], List[str]]: Normalized configuration and warnings.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    for field in ("output_dir", "project_name", "tree_style", "github_token", "log_level"):
        merged[field] = _as_str(merged.get(field), defaults[field], field, warnings)

    for field in ("organize_fallback", "create_archive", "respect_gitignore"):
        merged[field] = _as_bool(merged.get(field), defaults[field], field, warnings)

    merged["exclude_patterns"] = _as_list_str(
        merged.get("exclude_patterns"), defaults["exclude_patterns"], "exclude_patterns", warnings
    )

    if merged["tree_style"] not in TREE_STYLES:
        warnings.append(f"Unknown tree_style '{merged['tree_style']}'. Using '{DEFAULT_TREE_STYLE}'.")
        merged["tree_style"] = DEFAULT_TREE_STYLE

    level = merged["log_level"].upper()
    if level not in _LOG_LEVELS:
        warnings.append(f"Unknown log_level '{merged['log_level']}'. Using 'INFO'.")
        level = "INFO"
    merged["log_level"] = level

    return merged, warnings

# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str]) -> str:
    if value is None:
        return fallback
    if isinstance(value, str):
        return value.strip() or fallback

    warnings.append(f"Invalid field '{field}': expected str, received {type(value).__name__}. Using fallback.")
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str]) -> bool:
    """Coerce numbers and human-friendly keywords into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if isinstance(value, (int, float)) and value in (0, 1):
        warnings.append(f"Field '{field}' converted from number {value} to bool.")
        return bool(value)
    if isinstance(value, str):
        s = value.strip().lower()
        if s in ("true", "1", "yes", "y", "on"):
            warnings.append(f"Field '{field}' converted from '{value}' to True.")
            return True
        if s in ("false", "0", "no", "n", "off"):
            warnings.append(f"Field '{field}' converted from '{value}' to False.")
            return False

    warnings.append(f"Invalid field '{field}': expected bool, received {type(value).__name__}. Using fallback.")
    return fallback


def _as_list_str(value: Any, fallback: List[str], field: str, warnings: List[str]) -> List[str]:
    """Ensure input is a list of non-empty strings, accepting CSV strings."""
    if value is None:
        return list(fallback)

    if isinstance(value, str):
        items = [x.strip() for x in value.split(",") if x.strip()]
        if items:
            warnings.append(f"Field '{field}' converted from CSV string to list.")
        return items or list(fallback)

    if isinstance(value, list):
        out: List[str] = []
        for i, item in enumerate(value):
            if isinstance(item, str) and item.strip():
                out.append(item.strip())
            elif not isinstance(item, str):
                warnings.append(f"Invalid item in '{field}[{i}]': expected str. Item discarded.")
        return out

    warnings.append(f"Invalid field '{field}': expected list[str], received {type(value).__name__}. Using fallback.")
    return list(fallback)
