# pickbook/core/errors.py
from __future__ import annotations


class PickbookError(Exception):
    """Base class for errors raised by pickbook services."""


class ValidationError(PickbookError):
    """Malformed input; raised before any query or write is issued."""


class UpstreamError(PickbookError):
    """The database or a remote feed failed. Carries the underlying message verbatim."""
