"""
Operations Facade - Application service layer.

Provides a clean interface between the CLI and the registry client,
centralizing command orchestration while keeping CLI commands thin and
testable.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional

from ..annotations import AnnotationSet
from ..display import DEFAULT_PAGE_SIZE, iter_pages
from ..models import Descriptor, Reference
from ..options import PackerOptions, RepositoryListOptions
from ..settings import Settings
from ..storage.oci_registry import OciRegistry

logger = logging.getLogger(__name__)

RegistryFactory = Callable[[str], OciRegistry]


@dataclass(frozen=True)
class OpsConfig:
    """
    Configuration for Operations facade.

    Centralizes output policy so commands don't scatter it.
    """
    page_size: int = DEFAULT_PAGE_SIZE   # Names emitted per output page
    verbose: bool = False                # Show detailed output


@dataclass(frozen=True)
class ManifestResult:
    """A fetched manifest and the descriptor it was resolved to."""
    reference: Reference
    descriptor: Descriptor
    content: bytes


class Operations:
    """
    Application service facade for CLI operations.

    One method per CLI verb. Registry clients are obtained from an injected
    factory keyed by hostname, which lets tests swap in fakes. Exceptions
    bubble up unchanged for central mapping in ``run_and_exit``.
    """

    def __init__(self, config: OpsConfig, settings: Optional[Settings] = None,
                 registry_factory: Optional[RegistryFactory] = None):
        """
        Initialize Operations facade.

        Args:
            config: Configuration settings
            settings: Registry settings (if None, loaded from environment)
            registry_factory: Hostname -> registry client (defaults to RegistryHTTP)
        """
        self.cfg = config

        if settings is None:
            from ..settings import create_settings_from_env
            settings = create_settings_from_env()
        self.settings = settings

        if registry_factory is None:
            from ..storage.registry_http import RegistryHTTP
            registry_factory = lambda hostname: RegistryHTTP(hostname, self.settings)
        self.registry_factory = registry_factory

    def list_repositories(self, opts: RepositoryListOptions) -> Iterator[List[str]]:
        """
        List repositories under a registry.

        Each catalog batch is filtered and bounded on its own, then emitted
        in pages of ``config.page_size`` starting from a fresh cursor.

        Args:
            opts: Listing filters and bounds

        Yields:
            Non-empty pages of repository names
        """
        registry = self.registry_factory(opts.hostname)
        for batch in registry.repositories():
            selected = opts.select(batch)
            logger.debug(f"Selected {len(selected)} of {len(batch)} repositories from catalog page")
            yield from iter_pages(selected, self.cfg.page_size)

    def fetch_manifest(self, reference: Reference, packer: PackerOptions) -> ManifestResult:
        """
        Resolve and fetch a manifest, exporting it when requested.

        Args:
            reference: Manifest reference
            packer: Packer options (export path)

        Returns:
            ManifestResult with descriptor and raw manifest bytes
        """
        registry = self.registry_factory(reference.registry)
        descriptor = registry.resolve(reference.repository, reference.ref)
        logger.info(f"Resolved {reference} to {descriptor.digest}")

        content = registry.fetch_all(reference.repository, descriptor)
        packer.export_manifest(registry, reference.repository, descriptor)
        return ManifestResult(reference=reference, descriptor=descriptor, content=content)

    def resolve_annotations(self, packer: PackerOptions) -> AnnotationSet:
        """
        Resolve manifest annotations from flags or annotations file.

        Args:
            packer: Packer options carrying the annotation sources

        Returns:
            Annotation set keyed by scope
        """
        return packer.load_manifest_annotations()
