"""User-facing errors raised by the Live Dashboard engine.

Every error carries exactly one human-readable message intended to be shown
verbatim to the visitor. No structured error codes are exposed.
"""

from __future__ import annotations


class DashboardError(Exception):
    """Base class for recoverable Live Dashboard input errors.

    Args:
        message: Plain-text message suitable for direct display.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        """Return the display message."""

        return self.message


class ParseError(DashboardError):
    """Raised when delimited text is malformed or contains no usable rows."""


class UnsupportedFormatError(DashboardError):
    """Raised when an uploaded file extension is not accepted."""


class FileTooLargeError(DashboardError):
    """Raised when an uploaded file exceeds the size cap."""
