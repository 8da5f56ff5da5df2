from __future__ import annotations

"""
Tree Text Normalizer.

Turns pasted tree text into a document the parser can read: unwraps the
first markdown code fence, removes comment lines and trailing comments,
discards any preamble before the root line, and forces the root line into
its canonical `name/` shape.
"""

import logging
import re
from typing import List, NamedTuple, Optional

from treeforge.domain.errors import EmptyInputError

logger = logging.getLogger(__name__)

FENCE_MARKER = "```"

_FENCED_BLOCK_RE = re.compile(r"```[^\n`]*\n([\s\S]*?)\n[ \t]*```")

# Unindented single path segment ending in '/'
_ROOT_CANDIDATE_RE = re.compile(r"^(?![│├└┣┗╠╚|`+*\-])[^/\s]+/$")

# Characters a root line can never start with
_NON_ROOT_START = "/│├└┣┗╠╚|`"

# -----------------------------------------------------------------------------
# DATA MODEL
# -----------------------------------------------------------------------------

class SourceLine(NamedTuple):
    """A cleaned line together with its 1-based number in the raw input."""
    number: int
    text: str

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def clean_tree_lines(raw: Optional[str]) -> List[SourceLine]:
    """
    Strip markdown fences and comments from raw tree text.

    Keeps leading indentation and the original line numbers so diagnostics
    can point back at the user's input.

    Args:
        raw: Text as pasted by the user.

    Returns:
        List[SourceLine]: Non-blank, comment-free lines in document order.
    """
    if not raw or not raw.strip():
        return []

    text = raw.replace("\r\n", "\n").replace("\r", "\n")
    first_number = 1

    if FENCE_MARKER in text:
        match = _FENCED_BLOCK_RE.search(text)
        if match:
            first_number += text.count("\n", 0, match.start(1))
            text = match.group(1)
        else:
            logger.debug("Unbalanced code fence found. Dropping marker lines only.")
            text = "\n".join(
                "" if line.strip().startswith(FENCE_MARKER) else line
                for line in text.split("\n")
            )

    cleaned: List[SourceLine] = []
    for number, line in enumerate(text.split("\n"), start=first_number):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        hash_index = line.find("#")
        if hash_index > -1:
            line = line[:hash_index]
        line = line.rstrip()
        if not line.strip():
            continue

        cleaned.append(SourceLine(number, line))

    return cleaned


def normalize_tree_text(raw: Optional[str]) -> str:
    """
    Produce parser-ready tree text.

    Args:
        raw: Text as pasted by the user.

    Returns:
        str: Root line (forced to end with '/') followed by every line after
             it. Empty string for empty input.

    Raises:
        EmptyInputError: If the input only held fences, comments or blanks.
    """
    if not raw or not raw.strip():
        return ""

    lines = [source.text for source in clean_tree_lines(raw)]
    if not lines:
        raise EmptyInputError("No valid content found in tree structure")

    root_index = _find_root_index(lines)
    if root_index > 0:
        logger.debug(f"Discarding {root_index} preamble line(s) before the root.")

    root_line = lines[root_index].strip()
    if not root_line.endswith("/"):
        root_line += "/"

    return "\n".join([root_line] + lines[root_index + 1:])

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _find_root_index(lines: List[str]) -> int:
    """Locate the line that represents the root directory."""
    for index, line in enumerate(lines):
        if _ROOT_CANDIDATE_RE.match(line):
            return index

    for index, line in enumerate(lines):
        if not line[0].isspace() and line[0] not in _NON_ROOT_START:
            return index

    return 0
