"""
Errors raised while preprocessing.

Missing or unreadable files are never errors; everything below aborts the run.
"""

from __future__ import annotations

from typing import Optional


class PreprocessError(RuntimeError):
    """Preprocessing error with optional file and line information"""

    prefix = ""

    def __init__(self, message: str, filename: Optional[str] = None, line: Optional[int] = None):
        self.message = message
        self.filename = filename
        self.line = line
        super().__init__(message)

    def with_location(self, filename: str, line: int) -> "PreprocessError":
        """Attach a location unless an inner include already did."""
        if self.filename is None:
            self.filename = filename
            self.line = line
        return self

    def __str__(self) -> str:
        text = f"{self.prefix}{self.message}"
        if self.filename is not None:
            return f"{text} at {self.filename}:{self.line}"
        return text


class ExpressionError(PreprocessError):
    """Malformed #if expression"""

    prefix = "invalid expression: "


class DirectiveStructureError(PreprocessError):
    """Unbalanced #if/#ifdef/#ifndef/#else/#endif"""

    prefix = "invalid directive structure: "


class IncludeCycleError(PreprocessError):
    """A file includes itself, directly or through other files"""

    prefix = "include cycle detected: "
