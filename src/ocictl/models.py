"""
Data models for registry content.

Descriptors identify addressable content (manifests, blobs) by digest,
size and media type. References name content in a registry as
``registry/repository[:tag|@digest]``.
"""
from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = ["CatalogPage", "Descriptor", "Reference", "OCI_IMAGE_MANIFEST", "ACCEPTED_MANIFEST_TYPES", "digest_of"]

OCI_IMAGE_MANIFEST = "application/vnd.oci.image.manifest.v1+json"

# Manifest media types we accept (in order of preference)
ACCEPTED_MANIFEST_TYPES = [
    OCI_IMAGE_MANIFEST,
    "application/vnd.oci.image.index.v1+json",
    "application/vnd.oci.artifact.manifest.v1+json",
    "application/vnd.docker.distribution.manifest.v2+json",
    "application/vnd.docker.distribution.manifest.list.v2+json",
]

_DIGEST_RE = re.compile(r"^[a-z0-9]+(?:[.+_-][a-z0-9]+)*:[a-zA-Z0-9=_-]+$")
_SHA256_HEX_RE = re.compile(r"^[a-f0-9]{64}$")
_REPO_RE = re.compile(r"^[a-z0-9]+(?:(?:[._]|__|-+)[a-z0-9]+)*(?:/[a-z0-9]+(?:(?:[._]|__|-+)[a-z0-9]+)*)*$")
_TAG_RE = re.compile(r"^[\w][\w.-]{0,127}$")


def digest_of(content: bytes) -> str:
    """Compute the sha256 content digest of ``content``."""
    return f"sha256:{hashlib.sha256(content).hexdigest()}"


class Descriptor(BaseModel):
    """OCI content descriptor."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    media_type: str = Field(..., alias="mediaType", description="Media type of the referenced content")
    digest: str = Field(..., description="Content digest (algorithm:hex)")
    size: int = Field(..., ge=0, description="Content length in bytes")
    annotations: Optional[Dict[str, str]] = Field(default=None, description="Descriptor annotations")

    @field_validator("digest")
    @classmethod
    def validate_digest(cls, v: str) -> str:
        """Validate digest format; sha256 digests must carry 64 lowercase hex chars."""
        if not _DIGEST_RE.match(v):
            raise ValueError(f"Invalid digest format: {v}")
        algorithm, encoded = v.split(":", 1)
        if algorithm == "sha256" and not _SHA256_HEX_RE.match(encoded):
            raise ValueError(f"Invalid sha256 digest: {v}")
        return v


class CatalogPage(BaseModel):
    """One ``/v2/_catalog`` response body."""
    repositories: Optional[List[str]] = Field(default=None, description="Repository names on this page")

    @property
    def names(self) -> List[str]:
        return list(self.repositories or [])


@dataclass(frozen=True)
class Reference:
    """
    A parsed artifact reference.

    Exactly one of ``tag`` or ``digest`` is set after parsing; a reference
    with neither defaults to the ``latest`` tag.
    """
    registry: str
    repository: str
    tag: Optional[str] = None
    digest: Optional[str] = None

    @property
    def ref(self) -> str:
        """Tag or digest used in registry URLs."""
        return self.digest or self.tag or "latest"

    def __str__(self) -> str:
        if self.digest:
            return f"{self.registry}/{self.repository}@{self.digest}"
        return f"{self.registry}/{self.repository}:{self.ref}"

    @classmethod
    def parse(cls, raw: str) -> Reference:
        """
        Parse ``registry/repository[:tag|@digest]``.

        Supports formats:
        - "localhost:5000/hello:v1" -> tag v1
        - "ghcr.io/org/hello@sha256:<hex>" -> digest
        - "localhost:5000/hello" -> tag latest

        Raises:
            ValueError: If the reference format is invalid
        """
        raw = raw.strip()
        if "/" not in raw:
            raise ValueError(f"Invalid reference: {raw!r} (expected registry/repository[:tag|@digest])")

        registry, remainder = raw.split("/", 1)
        if not registry:
            raise ValueError(f"Invalid reference: {raw!r} (missing registry)")

        tag = digest = None
        if "@" in remainder:
            remainder, digest = remainder.split("@", 1)
            if not _DIGEST_RE.match(digest):
                raise ValueError(f"Invalid digest in reference: {digest}")
        else:
            # A colon after the last slash separates the tag
            last_segment = remainder.rsplit("/", 1)[-1]
            if ":" in last_segment:
                remainder, tag = remainder.rsplit(":", 1)
                if not _TAG_RE.match(tag):
                    raise ValueError(f"Invalid tag in reference: {tag}")

        if not _REPO_RE.match(remainder):
            raise ValueError(f"Invalid repository name: {remainder!r}")

        return cls(registry=registry, repository=remainder, tag=tag or (None if digest else "latest"), digest=digest)
