from __future__ import annotations

"""
Entry Name Filtering.

Regex-based exclusion logic for the local directory scanner, with support
for translating .gitignore glob rules into the same regex form.
"""

import fnmatch
import logging
import os
import re
from typing import List

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# CONFIGURATION DEFAULTS
# -----------------------------------------------------------------------------

def default_exclude_patterns() -> List[str]:
    """
    Get the exclusion patterns applied when scanning a local directory.

    Covers version-control metadata, dependency folders and compiled
    artifacts that would drown the tree in noise.

    Returns:
        List[str]: Regex patterns matched against entry names.
    """
    return [
        r"^(\.git|\.hg|\.svn|\.idea|\.vscode)$",
        r"^(__pycache__|node_modules|\.venv|venv|\.tox|\.pytest_cache)$",
        r".*\.py[co]$",
    ]

# -----------------------------------------------------------------------------
# PATTERN COMPILATION AND MATCHING
# -----------------------------------------------------------------------------

def compile_patterns(patterns: List[str]) -> List[re.Pattern]:
    """
    Transform raw regex strings into compiled Pattern objects.

    Malformed expressions are logged and discarded.

    Args:
        patterns: List of raw regex strings.

    Returns:
        List[re.Pattern]: Compiled regex objects.
    """
    compiled: List[re.Pattern] = []
    for p in patterns:
        try:
            compiled.append(re.compile(p))
        except re.error as e:
            logger.warning(f"Ignoring invalid exclusion pattern '{p}': {e}")
    return compiled


def matches_any(name: str, compiled_patterns: List[re.Pattern]) -> bool:
    """
    Verify if a string matches at least one compiled regex pattern.

    Args:
        name: File or directory name to evaluate.
        compiled_patterns: Pre-compiled regex objects.

    Returns:
        bool: True if any match is found, False otherwise.
    """
    return any(rx.search(name) for rx in compiled_patterns)

# -----------------------------------------------------------------------------
# GITIGNORE INTEGRATION
# -----------------------------------------------------------------------------

def load_gitignore_patterns(root_path: str) -> List[str]:
    """
    Parse a .gitignore file and translate its glob rules into regexes.

    Negations (`!rule`) are not supported and are skipped.

    Args:
        root_path: Directory containing the .gitignore file.

    Returns:
        List[str]: Equivalent regex strings (empty if no file).
    """
    gitignore_path = os.path.join(root_path, ".gitignore")
    if not os.path.isfile(gitignore_path):
        return []

    regex_patterns: List[str] = []
    try:
        with open(gitignore_path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith("#") or line.startswith("!"):
                    continue
                regex_patterns.append(_gitignore_to_regex(line))
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Could not read {gitignore_path}: {e}")

    return regex_patterns


def _gitignore_to_regex(glob_pattern: str) -> str:
    """Translate a gitignore glob (matched against entry names) to a regex."""
    glob_pattern = glob_pattern.strip("/")
    if "/" in glob_pattern:
        glob_pattern = glob_pattern.rsplit("/", 1)[-1]
    return fnmatch.translate(glob_pattern)
