"""
Registry access for ocictl.

The command layer depends on the protocols in ``oci_registry``; the HTTP
implementation lives in ``registry_http``.
"""
from .oci_errors import (
    OciAuthError,
    OciDigestMismatch,
    OciError,
    OciNotFound,
    OciRateLimited,
    OciSizeMismatch,
    OciUnsupportedMediaType,
)
from .oci_registry import ContentFetcher, OciRegistry

__all__ = [
    "ContentFetcher",
    "OciRegistry",
    "OciError",
    "OciAuthError",
    "OciNotFound",
    "OciDigestMismatch",
    "OciSizeMismatch",
    "OciUnsupportedMediaType",
    "OciRateLimited",
]
