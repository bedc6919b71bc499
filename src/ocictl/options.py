"""
Per-invocation option values.

Each command builds one immutable options value from its flags and passes it
to the operations that need it.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .annotations import AnnotationSet, load_manifest_annotations
from .display import cut, filter_repositories
from .export import export_manifest
from .models import Descriptor
from .storage.oci_registry import ContentFetcher

__all__ = ["PackerOptions", "RepositoryListOptions"]


@dataclass(frozen=True)
class PackerOptions:
    """
    Options shared by commands that pack or fetch manifests.

    Attributes:
        manifest_export_path: Where to export the manifest ("" disables export)
        path_validation_disabled: Skip validation of file reference paths
        annotations_file_path: JSON annotations file ("" when unused)
        manifest_annotations: Raw ``key=value`` annotation flags
        file_refs: File references given on the command line
    """
    manifest_export_path: str = ""
    path_validation_disabled: bool = False
    annotations_file_path: str = ""
    manifest_annotations: Tuple[str, ...] = ()
    file_refs: Tuple[str, ...] = ()

    def load_manifest_annotations(self) -> AnnotationSet:
        """Load the annotation set from the flags or the annotations file."""
        return load_manifest_annotations(self.annotations_file_path, self.manifest_annotations)

    def export_manifest(self, fetcher: ContentFetcher, repo: str, descriptor: Descriptor) -> None:
        """Save the manifest to ``manifest_export_path`` when one is set."""
        export_manifest(self.manifest_export_path, fetcher, repo, descriptor)


@dataclass(frozen=True)
class RepositoryListOptions:
    """Filters and bounds for listing a registry's repositories."""
    hostname: str
    first: int = 1000
    skip: int = 0
    startwith: str = ""
    endwith: str = ""
    contains: str = ""

    def select(self, names: Sequence[str]) -> List[str]:
        """Filter one catalog batch, then apply skip/first."""
        filtered = filter_repositories(names, self.startwith, self.endwith, self.contains)
        return cut(filtered, self.first, self.skip)
