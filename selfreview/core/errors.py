"""Error taxonomy shared by adapters, importers and the report session."""

from __future__ import annotations


class ReportError(Exception):
    """Base class for every error surfaced to the user as a single message."""


class ValidationError(ReportError):
    """Missing or malformed user input."""


class AuthError(ReportError):
    """Tracker credentials were rejected or are malformed."""


class NetworkError(ReportError):
    """An HTTP call could not be completed."""


class UpstreamError(NetworkError):
    """A remote service answered with a non-success status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ParseError(ReportError):
    """An uploaded file could not be read as a spreadsheet."""


class GenerationError(ReportError):
    """Report synthesis failed."""


__all__ = [
    "AuthError",
    "GenerationError",
    "NetworkError",
    "ParseError",
    "ReportError",
    "UpstreamError",
    "ValidationError",
]
