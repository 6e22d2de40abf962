"""Errors raised inside a single publisher fetch chain."""

from __future__ import annotations


class DirectoryError(Exception):
    """Base class for publisher directory errors."""


class TransportError(DirectoryError):
    """Raised when the transport could not obtain a response."""


class PaddingError(DirectoryError):
    """Raised when a response body is shorter than its declared length."""


class ParseError(DirectoryError):
    """Raised when a response payload is not a valid channel response list."""
