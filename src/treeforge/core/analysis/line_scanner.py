from __future__ import annotations

"""
Tree Line Scanner.

Dissects a single line of tree text into its indentation level, branch
connector and label. Shared by the parser, the validator and the fallback
materializer so that all three agree on what a line means.

The indent unit (columns per nesting level) is inferred once per document:
canonical output uses 3, `tree` output uses 4, hand-typed outlines use 2-4.
"""

from dataclasses import dataclass
from typing import Iterable

from treeforge.domain.constants import (
    BRANCH_CONNECTOR_RE,
    DECORATIVE_GLYPHS,
    DEFAULT_INDENT_UNIT,
    KNOWN_EMOJIS,
    MAX_INDENT_UNIT,
    MIN_INDENT_UNIT,
    VERTICAL_GLYPHS,
)

# Regular and non-breaking spaces (pasted from rendered markdown)
_INDENT_SPACES = " \u00a0"

# -----------------------------------------------------------------------------
# DATA MODEL
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class LineShape:
    """
    Structural reading of one tree line.

    Attributes:
        level: Nesting level of the entry. Lines with a branch connector sit
               one level below their indentation prefix.
        connector: Branch connector found, stripped ("" when none).
        label: Remaining text with decorative emoji removed.
        vertical_bars: Number of vertical continuation glyphs in the prefix.
    """
    level: int
    connector: str
    label: str
    vertical_bars: int

    @property
    def is_directory(self) -> bool:
        return self.label.endswith("/")

    @property
    def name(self) -> str:
        return self.label.rstrip("/").strip()

    @property
    def is_decorative(self) -> bool:
        """True when the line carries no name, only glyphs and whitespace."""
        return all(ch in DECORATIVE_GLYPHS or ch.isspace() for ch in self.name)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def infer_indent_unit(lines: Iterable[str]) -> int:
    """
    Infer how many columns one nesting level occupies in a document.

    Candidates are leading space runs and the width of each vertical glyph
    plus its trailing padding. The smallest candidate wins, clamped to the
    supported range.

    Args:
        lines: Document lines (root line included or not).

    Returns:
        int: Indent unit in columns.
    """
    candidates = []
    for line in lines:
        leading = len(line) - len(line.lstrip(_INDENT_SPACES))
        if 0 < leading < len(line) and line[leading] != "\t":
            candidates.append(leading)

        i = leading
        while i < len(line) and line[i] in VERTICAL_GLYPHS:
            if BRANCH_CONNECTOR_RE.match(line, i):
                break
            j = i + 1
            while j < len(line) and line[j] in _INDENT_SPACES:
                j += 1
            if j < len(line):
                candidates.append(j - i)
            i = j

    if not candidates:
        return DEFAULT_INDENT_UNIT
    return max(MIN_INDENT_UNIT, min(MAX_INDENT_UNIT, min(candidates)))


def scan_line(line: str, unit: int = DEFAULT_INDENT_UNIT) -> LineShape:
    """
    Read the indentation prefix, branch connector and label of a line.

    Scanning advances one level per vertical glyph (consuming its padding),
    per tab, and per indent unit of spaces. It stops at the first branch
    connector or at the first character that is not indentation.

    Args:
        line: Raw line text.
        unit: Indent unit of the document (see infer_indent_unit).

    Returns:
        LineShape: Structural reading of the line.
    """
    unit = max(1, unit)
    i = 0
    indent_level = 0
    pending_spaces = 0
    bars = 0
    connector = ""

    while i < len(line):
        match = BRANCH_CONNECTOR_RE.match(line, i)
        if match:
            connector = match.group(0).strip()
            i = match.end()
            break

        ch = line[i]
        if ch in VERTICAL_GLYPHS:
            indent_level += _space_levels(pending_spaces, unit) + 1
            pending_spaces = 0
            bars += 1
            i += 1
            padding = 0
            while i < len(line) and line[i] in _INDENT_SPACES and padding < unit - 1:
                i += 1
                padding += 1
        elif ch == "\t":
            indent_level += _space_levels(pending_spaces, unit) + 1
            pending_spaces = 0
            i += 1
        elif ch in _INDENT_SPACES:
            pending_spaces += 1
            i += 1
        else:
            break

    indent_level += _space_levels(pending_spaces, unit)
    label = strip_marker_emoji(line[i:].strip())
    level = indent_level + (1 if connector else 0)
    return LineShape(level=level, connector=connector, label=label, vertical_bars=bars)


def strip_marker_emoji(label: str) -> str:
    """
    Remove a leading folder/file emoji written as a marker.

    Only an emoji followed by whitespace is a marker ("📁 src/"); an emoji
    glued to the name ("📁x") is part of the name.
    """
    for emoji in KNOWN_EMOJIS:
        rest = label[len(emoji):]
        if label.startswith(emoji) and rest[:1].isspace():
            return rest.lstrip()
    return label

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _space_levels(count: int, unit: int) -> int:
    """Convert a run of spaces to levels, rounding half a unit down."""
    return (2 * count + unit - 1) // (2 * unit)
