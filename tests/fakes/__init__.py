"""In-memory fakes for ocictl tests."""
from .fake_registry import FakeRegistry

__all__ = ["FakeRegistry"]
