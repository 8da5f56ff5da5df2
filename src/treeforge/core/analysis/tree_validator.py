from __future__ import annotations

"""
Tree Text Validator.

Lints raw tree text without building a model. Findings are collected as
typed diagnostics instead of being raised, so a single pass reports every
malformed line together with the first indentation jump.
"""

import logging
import re
from typing import List, Optional, Union

from treeforge.core.analysis.line_scanner import infer_indent_unit, scan_line
from treeforge.core.analysis.normalizer import clean_tree_lines
from treeforge.domain.errors import (
    EmptyInputError,
    IndentationJumpError,
    InvalidLineFormatError,
    MissingRootError,
    TreeStructureError,
)
from treeforge.domain.pipeline_models import ValidationReport

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# LINE PATTERNS
# -----------------------------------------------------------------------------

_ROOT_FORMAT_RE = re.compile(r"^[^/]+/$")

# `tree` and canonical output: "│   ├── name"
_STANDARD_ENTRY_RE = re.compile(
    r"^(?:[│┃┆┇┊┋|]\s*)*(?:├──|└──|├─|└─)\s+([^/]+?)(/)?$"
)

# ASCII art and markdown bullets: "|-- name", "`- name", "- name"
_SIMPLIFIED_ENTRY_RE = re.compile(
    r"^[\s│|]*(?:[-─*]+|\|-+|`-+|\+-+|[├└]─*)\s+([^/]+?)(/)?$"
)

# Plain indentation: "    name"
_INDENTED_ENTRY_RE = re.compile(
    r"^[\s│┃┆┇┊┋|]*([^│├└─\s/][^/]*?)(/)?$"
)

_ENTRY_PATTERNS = (_STANDARD_ENTRY_RE, _SIMPLIFIED_ENTRY_RE, _INDENTED_ENTRY_RE)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_tree_text(raw: Optional[Union[str, bytes]]) -> ValidationReport:
    """
    Validate tree text and collect every structural problem.

    Never raises. Line numbers in the messages refer to the raw input.

    Args:
        raw: Text as pasted by the user.

    Returns:
        ValidationReport: Diagnostics in document order.
    """
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    elif raw is not None and not isinstance(raw, str):
        raw = str(raw)

    if not raw or not raw.strip():
        return ValidationReport([EmptyInputError("Tree structure cannot be empty", line=1)])

    lines = clean_tree_lines(raw)
    if not lines:
        return ValidationReport([
            EmptyInputError("Tree structure contains only comments or markdown delimiters")
        ])

    diagnostics: List[TreeStructureError] = []

    root = lines[0]
    root_error = _check_root(root.text.strip(), root.number)
    if root_error:
        diagnostics.append(root_error)

    body = lines[1:]
    unit = infer_indent_unit(line.text for line in body)
    previous_level = 0
    jump_reported = False

    for line in body:
        shape = scan_line(line.text, unit)
        if shape.is_decorative:
            continue

        stripped = line.text.strip()
        if not any(rx.match(stripped) for rx in _ENTRY_PATTERNS):
            diagnostics.append(
                InvalidLineFormatError(f"Line {line.number} has invalid format", line=line.number)
            )
            continue

        if shape.level > previous_level + 1 and not jump_reported:
            diagnostics.append(IndentationJumpError(
                f"Inconsistent indentation at line {line.number}: expected at most "
                f"level {previous_level + 1} but got level {shape.level}",
                line=line.number,
            ))
            jump_reported = True
        previous_level = shape.level

    if diagnostics:
        logger.debug(f"Validation found {len(diagnostics)} problem(s).")
    return ValidationReport(diagnostics)

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _check_root(text: str, number: int) -> Optional[MissingRootError]:
    if not text.endswith("/"):
        return MissingRootError(
            'Root must end with "/": the first line must be a root folder such as "project/"',
            line=number,
        )
    if not _ROOT_FORMAT_RE.match(text):
        return MissingRootError('Root directory must be in the format "folder-name/"', line=number)
    return None
