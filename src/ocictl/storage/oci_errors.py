"""
OCI registry error classes.

Provides a clear taxonomy of errors that can occur during registry calls.
These errors are mapped from HTTP status codes and transport failures so the
command layer can pass them through unchanged.
"""
from __future__ import annotations


class OciError(Exception):
    """
    Base class for all OCI registry errors.

    Raised directly for unexpected HTTP statuses and network failures.
    """
    pass


class OciAuthError(OciError):
    """
    Authentication or authorization error.

    Raised when:
    - HTTP 401 Unauthorized (invalid or missing credentials)
    - HTTP 403 Forbidden (insufficient permissions)
    """
    pass


class OciNotFound(OciError):
    """
    Resource not found in registry.

    Raised when:
    - HTTP 404 Not Found (manifest, repository or catalog doesn't exist)
    """
    pass


class OciDigestMismatch(OciError):
    """
    Fetched content does not hash to the expected digest.
    """

    def __init__(self, message: str, expected: str | None = None, actual: str | None = None):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class OciSizeMismatch(OciError):
    """
    Fetched content length differs from the descriptor size.
    """

    def __init__(self, message: str, expected: int | None = None, actual: int | None = None):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class OciUnsupportedMediaType(OciError):
    """
    Registry returned a manifest media type the client does not accept.
    """
    pass


class OciRateLimited(OciError):
    """
    Rate limit exceeded.

    Raised when:
    - HTTP 429 Too Many Requests
    """
    pass


__all__ = [
    "OciError",
    "OciAuthError",
    "OciNotFound",
    "OciDigestMismatch",
    "OciSizeMismatch",
    "OciUnsupportedMediaType",
    "OciRateLimited",
]
