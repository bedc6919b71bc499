"""
Manifest export.

Writes the raw bytes of a manifest, as served by the registry, to a local
file so users can inspect or archive exactly what was pushed or fetched.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .models import Descriptor
from .storage.oci_registry import ContentFetcher

__all__ = ["export_manifest"]

logger = logging.getLogger(__name__)


def export_manifest(path: Optional[str], fetcher: ContentFetcher, repo: str,
                    descriptor: Descriptor) -> None:
    """
    Save the manifest identified by ``descriptor`` to ``path``.

    An empty path disables export and returns without fetching. The file is
    created or truncated; fetch and write errors propagate unchanged.

    Args:
        path: Destination file ("" or None to skip)
        fetcher: Content fetcher for the manifest's repository
        repo: Repository path the manifest lives in
        descriptor: Manifest descriptor
    """
    if not path:
        return

    manifest_bytes = fetcher.fetch_all(repo, descriptor)
    Path(path).write_bytes(manifest_bytes)
    logger.info(f"Exported manifest {descriptor.digest} to {path}")
