from __future__ import annotations

"""
Tree Structure Error Taxonomy.

Parsing failures are raised to the caller, validator findings are collected
as data, and materialization failures are absorbed per item. All of them
share one base so interface layers can map the whole family at once.
"""

from typing import Optional

# -----------------------------------------------------------------------------
# BASE
# -----------------------------------------------------------------------------

class TreeStructureError(Exception):
    """
    Base class for every tree text and tree materialization failure.

    Attributes:
        message: Human-readable description surfaced to the user verbatim.
        line: 1-based line number in the raw input, when applicable.
    """

    def __init__(self, message: str, line: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line = line

    def __str__(self) -> str:
        return self.message

# -----------------------------------------------------------------------------
# FATAL (RAISED)
# -----------------------------------------------------------------------------

class EmptyInputError(TreeStructureError):
    """No usable content remains after normalization."""


class MissingRootError(TreeStructureError):
    """The first meaningful line cannot be read as a root directory."""


class InvalidProjectNameError(TreeStructureError):
    """A build was requested with a name that is unsafe as a directory."""


class RemoteRepositoryError(TreeStructureError):
    """The remote repository listing could not be retrieved."""

# -----------------------------------------------------------------------------
# DIAGNOSTICS (COLLECTED)
# -----------------------------------------------------------------------------

class InvalidLineFormatError(TreeStructureError):
    """A line matches none of the accepted entry patterns."""


class IndentationJumpError(TreeStructureError):
    """A line is nested more than one level below the line before it."""


class MaterializationIOError(TreeStructureError):
    """
    A single file or directory could not be created on disk.

    Attributes:
        path: Target path of the failed item.
    """

    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path
