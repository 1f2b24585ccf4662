"""Exception hierarchy shared by the document entry store and template renderer.

Callers can react to broad categories (bad arguments, unreadable archives,
missing entries, unsupported transitions) while still catching the builtin
exception type each category naturally maps onto. Merge engine failures are
deliberately absent: they propagate to the caller unchanged.
"""

from __future__ import annotations

from typing import Optional

__all__ = [
    "ReportForgeError",
    "DocumentArgumentError",
    "DocumentReadError",
    "EntryNotFoundError",
    "UnsupportedOperationError",
]


class ReportForgeError(RuntimeError):
    """Base exception for document store and rendering failures."""


class DocumentArgumentError(ReportForgeError, ValueError):
    """Raised when a stream, path, context, or destination argument is missing."""

    def __init__(self, argument: str, message: Optional[str] = None) -> None:
        super().__init__(message or f"Argument '{argument}' must not be null or empty")
        self.argument = argument


class DocumentReadError(ReportForgeError, IOError):
    """Raised when an archive cannot be read back completely."""

    def __init__(
        self,
        message: str,
        *,
        entry_path: Optional[str] = None,
        expected: Optional[int] = None,
        actual: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.entry_path = entry_path
        self.expected = expected
        self.actual = actual


class EntryNotFoundError(ReportForgeError, KeyError):
    """Raised when a document has no entry stored under the requested path."""

    def __init__(self, entry_path: str) -> None:
        super().__init__(entry_path)
        self.entry_path = entry_path

    def __str__(self) -> str:
        return f"Document entry not found: {self.entry_path}"


class UnsupportedOperationError(ReportForgeError, NotImplementedError):
    """Raised when compiling a template or an already rendered document."""
