from __future__ import annotations

"""
Domain Constants and Static Data Structures.

Centralizes the glyph vocabulary shared by the tree normalizer, parser,
validator and renderer, the filesystem naming rules applied to parsed
labels, and the keyword table of the fallback organizer.
"""

import re
from typing import Dict, Tuple

APP_VERSION = "1.0.0"
CURRENT_CONFIG_VERSION = "1.0.0"
DEFAULT_PROJECT_NAME = "project"

# -----------------------------------------------------------------------------
# CONNECTOR GLYPHS
# -----------------------------------------------------------------------------

# Vertical continuations: box-drawing variants plus the ASCII pipe
VERTICAL_GLYPHS = "│┃┆┇┊┋|"

# Everything that may decorate a line without being part of a name
DECORATIVE_GLYPHS = "│┃┆┇┊┋├└┣┗╠╚─━═|`+"

# Leading markers some exporters put before names
KNOWN_EMOJIS: Tuple[str, ...] = ("📁", "📂", "📄")

# Ordered alternatives; the first match at the scan position wins
BRANCH_CONNECTOR_RE = re.compile(
    r"(?:[├└┣┗╠╚][─━═\-]*"      # box-drawing branches: ├──, └─, ├
    r"|[|`+][─\-]+"             # ASCII branches: |--, `--, +--, |-
    r"|[─\-]{2,}"               # bare dash runs: --, ──
    r"|[-*](?=\s))"             # markdown bullets: "- ", "* "
    r"[ \t]*"
)

# -----------------------------------------------------------------------------
# RENDERING STYLES
# -----------------------------------------------------------------------------

TREE_STYLES: Dict[str, Dict[str, str]] = {
    "canonical": {
        "branch": "├─ ",
        "last": "└─ ",
        "pipe": "│  ",
        "space": "   ",
    },
    "classic": {
        "branch": "├── ",
        "last": "└── ",
        "pipe": "│   ",
        "space": "    ",
    },
}
DEFAULT_TREE_STYLE = "canonical"

# -----------------------------------------------------------------------------
# INDENTATION
# -----------------------------------------------------------------------------

MIN_INDENT_UNIT = 2
MAX_INDENT_UNIT = 4
DEFAULT_INDENT_UNIT = 4

# -----------------------------------------------------------------------------
# FILESYSTEM NAMING
# -----------------------------------------------------------------------------

FORBIDDEN_NAME_CHARS_RE = re.compile(r'[<>:"|?*]')
FORBIDDEN_NAME_REPLACEMENT = "_"

# -----------------------------------------------------------------------------
# FALLBACK ORGANIZER
# -----------------------------------------------------------------------------

# Substring of a loose file name -> top-level folder it is moved into
COMMON_FOLDER_KEYWORDS: Dict[str, str] = {
    "controller": "controllers",
    "service": "services",
    "model": "models",
    "route": "routes",
    "middleware": "middleware",
    "util": "utils",
    "helper": "helpers",
    "component": "components",
}
