from __future__ import annotations

"""
Unit tests for the Tree Line Scanner.

Verifies:
1. Level computation across connector dialects.
2. Indent unit inference.
3. Label cleanup (emoji, trailing slash, decorative lines).
"""

from treeforge.core.analysis.line_scanner import infer_indent_unit, scan_line

# -----------------------------------------------------------------------------
# LEVELS
# -----------------------------------------------------------------------------

def test_canonical_connector_levels() -> None:
    """TC-01: Canonical connectors sit one level below their prefix."""
    top = scan_line("├─ src/", 3)
    nested = scan_line("│  └─ index.js", 3)

    assert top.level == 1
    assert top.connector == "├─"
    assert top.is_directory is True
    assert top.name == "src"

    assert nested.level == 2
    assert nested.vertical_bars == 1
    assert nested.is_directory is False
    assert nested.name == "index.js"


def test_classic_connector_levels() -> None:
    """TC-02: `tree` output with four-column units."""
    assert scan_line("├── a.py", 4).level == 1
    assert scan_line("│   ├── b.py", 4).level == 2
    assert scan_line("│       └── c.py", 4).level == 3
    assert scan_line("    └── d.py", 4).level == 2


def test_ascii_connectors() -> None:
    """TC-03: ASCII branches are recognized as connectors."""
    pipe = scan_line("|-- lib/", 4)
    backtick = scan_line("|   `-- main.c", 4)
    plus = scan_line("+-- notes.txt", 4)

    assert (pipe.connector, pipe.level) == ("|--", 1)
    assert (backtick.connector, backtick.level) == ("`--", 2)
    assert (plus.connector, plus.level) == ("+--", 1)


def test_bare_indentation_and_tabs() -> None:
    """TC-04: Space runs and tabs advance levels without a connector."""
    assert scan_line("src/", 2).level == 0
    assert scan_line("  src/", 2).level == 1
    assert scan_line("    a.js", 2).level == 2
    assert scan_line("\t\tfile.txt", 4).level == 2


def test_markdown_bullets() -> None:
    """TC-05: Markdown bullets behave like branch connectors."""
    top = scan_line("- src/", 2)
    nested = scan_line("  * main.py", 2)

    assert (top.connector, top.level) == ("-", 1)
    assert (nested.connector, nested.level) == ("*", 2)


def test_hyphenated_names_are_not_connectors() -> None:
    """TC-06: A dash inside a name never starts a connector."""
    shape = scan_line("├─ my-file-name.txt", 3)
    assert shape.name == "my-file-name.txt"

# -----------------------------------------------------------------------------
# LABELS
# -----------------------------------------------------------------------------

def test_emoji_prefix_removed() -> None:
    """TC-07: Folder and file emoji prefixes are stripped from labels."""
    assert scan_line("├── 📁 docs/", 4).label == "docs/"
    assert scan_line("│   └── 📄 guide.md", 4).name == "guide.md"


def test_decorative_lines() -> None:
    """TC-08: Lines holding only glyphs carry no entry."""
    assert scan_line("│", 3).is_decorative is True
    assert scan_line("├──", 4).is_decorative is True
    assert scan_line("│   │", 4).is_decorative is True
    assert scan_line("├── a", 4).is_decorative is False

# -----------------------------------------------------------------------------
# INDENT UNIT INFERENCE
# -----------------------------------------------------------------------------

def test_infer_unit_from_canonical_glyphs() -> None:
    """TC-09: Canonical output infers a three-column unit."""
    assert infer_indent_unit(["├─ a/", "│  └─ b"]) == 3


def test_infer_unit_from_spaces() -> None:
    """TC-10: Hand-typed outlines infer their smallest indentation."""
    assert infer_indent_unit(["a/", "  b/", "    c"]) == 2


def test_infer_unit_classic_and_defaults() -> None:
    """TC-11: Classic output gives four; no evidence gives the default."""
    assert infer_indent_unit(["│   ├── x", "    └── y"]) == 4
    assert infer_indent_unit([]) == 4
    assert infer_indent_unit(["a", "b"]) == 4


def test_infer_unit_is_clamped() -> None:
    """TC-12: Units outside 2..4 are clamped."""
    assert infer_indent_unit(["a", " b"]) == 2
    assert infer_indent_unit(["a", "        b"]) == 4


def test_glued_emoji_is_part_of_the_name() -> None:
    """TC-13: Only an emoji followed by whitespace is a marker."""
    assert scan_line("├── 📁x", 4).name == "📁x"
    assert scan_line("└── 📄\tnotes.txt", 4).name == "notes.txt"
