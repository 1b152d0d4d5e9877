"""Errors raised by the Typesense client.

Every non-2xx response is mapped to a ``TypesenseStatusError`` subclass; a
failure below HTTP (refused connection, timeout) is a ``TypesenseConnectionError``.
"""

from __future__ import annotations

from typing import Optional


class TypesenseError(Exception):
    """Base class for all Typesense client failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class TypesenseStatusError(TypesenseError):
    """Backend answered with a non-2xx status."""

    def __init__(self, status: int, message: Optional[str] = None) -> None:
        super().__init__(message or f"HTTP {status}")
        self.status = status


class TypesenseRetryableError(TypesenseStatusError):
    """Transient status (service unavailable, not ready yet)."""


class TypesenseNotFoundError(TypesenseStatusError):
    """HTTP 404."""


class TypesenseConflictError(TypesenseStatusError):
    """HTTP 409, e.g. creating a collection that already exists."""


class TypesenseConnectionError(TypesenseError):
    """The request never produced an HTTP response."""
