"""
Settings and configuration for ocictl.

Centralizes registry connection values and validates them with fail-fast
behavior. Settings are loaded from environment variables once per command
invocation and may be overridden by CLI flags.
"""
from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from typing import Optional

__all__ = ["Settings", "create_settings_from_env"]


@dataclass(frozen=True)
class Settings:
    """
    Configuration settings for registry access.

    Registry Settings:
        registry_insecure: Skip TLS certificate verification
        registry_plain_http: Talk plain HTTP instead of HTTPS
        registry_user: Username for registry authentication
        registry_pass: Password for registry authentication
        docker_config: Directory holding the Docker config.json used for auth
        http_timeout_s: HTTP request timeout in seconds
        http_retry: Number of retries for timed-out requests (0=no retry)
        catalog_page_size: Number of repositories requested per catalog call
    """
    registry_insecure: bool = False
    registry_plain_http: bool = False
    registry_user: Optional[str] = None
    registry_pass: Optional[str] = None
    docker_config: Optional[str] = None
    http_timeout_s: float = 30.0
    http_retry: int = 0
    catalog_page_size: int = 100

    def __post_init__(self):
        """Validate settings on construction."""
        if self.http_timeout_s <= 0:
            raise ValueError(f"http_timeout_s must be positive, got {self.http_timeout_s}")

        if self.http_retry < 0:
            raise ValueError(f"http_retry must be non-negative, got {self.http_retry}")

        if self.catalog_page_size <= 0:
            raise ValueError(f"catalog_page_size must be positive, got {self.catalog_page_size}")

        # Credentials come in pairs
        if self.registry_user and not self.registry_pass:
            raise ValueError("registry_user specified but registry_pass is missing")
        if self.registry_pass and not self.registry_user:
            raise ValueError("registry_pass specified but registry_user is missing")

    def with_overrides(self, **overrides) -> Settings:
        """
        Return a copy with the given fields replaced.

        ``None`` values are ignored so unset CLI flags keep the
        environment-derived value.
        """
        changes = {key: value for key, value in overrides.items() if value is not None}
        return dataclasses.replace(self, **changes)


def create_settings_from_env() -> Settings:
    """
    Load settings from environment variables.

    Environment Variables:
        - OCICTL_REGISTRY_INSECURE (default: false)
        - OCICTL_REGISTRY_PLAIN_HTTP (default: false)
        - OCICTL_REGISTRY_USERNAME (optional)
        - OCICTL_REGISTRY_PASSWORD (optional)
        - DOCKER_CONFIG (optional, defaults to ~/.docker)
        - OCICTL_HTTP_TIMEOUT (default: 30.0)
        - OCICTL_HTTP_RETRY (default: 0)
        - OCICTL_CATALOG_PAGE_SIZE (default: 100)

    Returns:
        Settings object with validated configuration

    Raises:
        ValueError: If configuration is invalid

    Note:
        Creates a fresh Settings instance every time (no caching).
    """
    def str_to_bool(value: str) -> bool:
        return value.lower() in ('true', '1', 'yes', 'on')

    def get_float(key: str, default: float) -> float:
        value = os.getenv(key)
        return float(value) if value else default

    def get_int(key: str, default: int) -> int:
        value = os.getenv(key)
        return int(value) if value else default

    return Settings(
        registry_insecure=str_to_bool(os.getenv("OCICTL_REGISTRY_INSECURE", "false")),
        registry_plain_http=str_to_bool(os.getenv("OCICTL_REGISTRY_PLAIN_HTTP", "false")),
        registry_user=os.getenv("OCICTL_REGISTRY_USERNAME") or None,
        registry_pass=os.getenv("OCICTL_REGISTRY_PASSWORD") or None,
        docker_config=os.getenv("DOCKER_CONFIG") or None,
        http_timeout_s=get_float("OCICTL_HTTP_TIMEOUT", 30.0),
        http_retry=get_int("OCICTL_HTTP_RETRY", 0),
        catalog_page_size=get_int("OCICTL_CATALOG_PAGE_SIZE", 100),
    )
