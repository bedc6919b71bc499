"""
OCI registry protocol definitions.

The command layer only depends on these contracts, which lets tests inject
in-memory fakes in place of the HTTP client.
"""
from __future__ import annotations

from typing import Iterator, List, Protocol, runtime_checkable

from ..models import Descriptor


@runtime_checkable
class ContentFetcher(Protocol):
    """Fetches content addressed by a descriptor."""

    def fetch_all(self, repo: str, descriptor: Descriptor) -> bytes:
        """
        Fetch the full content identified by ``descriptor``.

        Args:
            repo: Repository path (e.g., "org/hello")
            descriptor: Descriptor of the content to fetch

        Returns:
            Raw content bytes, verified against the descriptor size and digest

        Raises:
            OciNotFound: If the content doesn't exist
            OciSizeMismatch: If the content length differs from descriptor.size
            OciDigestMismatch: If the content doesn't hash to descriptor.digest
            OciError: For other registry errors
        """
        ...


@runtime_checkable
class OciRegistry(ContentFetcher, Protocol):
    """Registry-level operations used by ocictl commands."""

    def repositories(self, last: str = "") -> Iterator[List[str]]:
        """
        Iterate the registry catalog.

        Yields one batch of repository names per server-side page, in the
        order the registry returns them.

        Args:
            last: Resume listing after this repository name ("" from the start)

        Raises:
            OciAuthError: If authentication fails
            OciError: For other registry errors
        """
        ...

    def resolve(self, repo: str, ref: str) -> Descriptor:
        """
        Resolve a tag or digest to the manifest descriptor.

        Raises:
            OciNotFound: If the manifest doesn't exist
            OciError: For other registry errors
        """
        ...

    def close(self) -> None:
        """Release connections held by the client."""
        ...


__all__ = ["ContentFetcher", "OciRegistry"]
