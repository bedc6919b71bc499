"""Root pytest configuration for ocictl tests."""
import pytest

from ocictl.settings import Settings
from .fakes.fake_registry import FakeRegistry


# Set up test environment variables
@pytest.fixture(autouse=True)
def test_env(monkeypatch, tmp_path):
    """Isolate tests from the caller's registry configuration."""
    for key in (
        "OCICTL_REGISTRY_INSECURE",
        "OCICTL_REGISTRY_PLAIN_HTTP",
        "OCICTL_REGISTRY_USERNAME",
        "OCICTL_REGISTRY_PASSWORD",
        "OCICTL_HTTP_TIMEOUT",
        "OCICTL_HTTP_RETRY",
        "OCICTL_CATALOG_PAGE_SIZE",
    ):
        monkeypatch.delenv(key, raising=False)
    # Point Docker auth at an empty directory
    monkeypatch.setenv("DOCKER_CONFIG", str(tmp_path / "docker"))


@pytest.fixture
def settings(tmp_path):
    """Standard test settings."""
    return Settings(
        registry_plain_http=True,
        docker_config=str(tmp_path / "docker"),
        catalog_page_size=2,
    )


@pytest.fixture
def registry():
    """Fake registry with a small catalog and one manifest."""
    fake = FakeRegistry(catalog_pages=[["alpine", "app/api", "app/web"], ["busybox", "tools/app"]])
    fake.add_manifest("app/api", "v1", b'{"schemaVersion":2,"layers":[]}')
    return fake
