"""
Tests for manifest export to a local file.
"""
from __future__ import annotations

import pytest

from ocictl.export import export_manifest
from ocictl.models import Descriptor
from ocictl.options import PackerOptions
from ocictl.storage.oci_errors import OciError, OciNotFound
from tests.fakes.fake_registry import FailingFetcher

MANIFEST = b'{"schemaVersion":2,"mediaType":"application/vnd.oci.image.manifest.v1+json","layers":[]}'


class TestExportManifest:
    """Test export_manifest behaviour."""

    def test_empty_path_skips_fetch(self):
        """Test that an empty path returns without touching the fetcher."""
        fetcher = FailingFetcher()
        export_manifest("", fetcher, "app/api", Descriptor(media_type="x", digest="sha256:" + "0" * 64, size=0))
        export_manifest(None, fetcher, "app/api", Descriptor(media_type="x", digest="sha256:" + "0" * 64, size=0))
        assert fetcher.calls == 0

    def test_writes_bytes_verbatim(self, tmp_path, registry):
        """Test that fetched bytes are written unchanged."""
        descriptor = registry.add_manifest("app/api", "v2", MANIFEST)
        out = tmp_path / "manifest.json"

        export_manifest(str(out), registry, "app/api", descriptor)

        assert out.read_bytes() == MANIFEST
        assert registry.fetch_calls == [("app/api", descriptor.digest)]

    def test_overwrites_existing_file(self, tmp_path, registry):
        """Test that an existing file is truncated and replaced."""
        descriptor = registry.add_manifest("app/api", "v2", MANIFEST)
        out = tmp_path / "manifest.json"
        out.write_bytes(b"x" * 1000)

        export_manifest(str(out), registry, "app/api", descriptor)

        assert out.read_bytes() == MANIFEST

    def test_fetch_error_propagates_unchanged(self, tmp_path):
        """Test that fetch errors are not wrapped and nothing is written."""
        error = OciNotFound("gone")
        out = tmp_path / "manifest.json"
        with pytest.raises(OciNotFound) as exc_info:
            export_manifest(str(out), FailingFetcher(error), "app/api",
                            Descriptor(media_type="x", digest="sha256:" + "0" * 64, size=0))
        assert exc_info.value is error
        assert not out.exists()

    def test_write_error_propagates(self, tmp_path, registry):
        """Test that an unwritable destination raises OSError."""
        descriptor = registry.add_manifest("app/api", "v2", MANIFEST)
        with pytest.raises(OSError):
            export_manifest(str(tmp_path / "missing-dir" / "m.json"), registry, "app/api", descriptor)

    def test_packer_options_export(self, tmp_path, registry):
        """Test export through PackerOptions."""
        descriptor = registry.add_manifest("app/api", "v2", MANIFEST)
        out = tmp_path / "exported.json"

        PackerOptions(manifest_export_path=str(out)).export_manifest(registry, "app/api", descriptor)
        PackerOptions().export_manifest(FailingFetcher(OciError("unused")), "app/api", descriptor)

        assert out.read_bytes() == MANIFEST
