"""Error taxonomy shared by the parser engine and the format plugins."""

from __future__ import annotations


class ParseError(Exception):
    """Base class for every error raised by flatio."""


class NotSupportedError(ParseError):
    """Raised when an optional capability (e.g. ``seek``) is not available.

    Recoverable: callers can fall back to a linear scan.
    """


class UnsupportedFormatError(ParseError):
    """Raised by the factory for an unrecognised format identifier."""


class MalformedBlockError(ParseError, ValueError):
    """Raised by plugins when a block cannot be decoded."""


class DependencyMissingError(ParseError):
    """Raised when the third-party reader for a format is not installed."""


__all__ = [
    "ParseError",
    "NotSupportedError",
    "UnsupportedFormatError",
    "MalformedBlockError",
    "DependencyMissingError",
]
