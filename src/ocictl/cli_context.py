"""
CLI Context for managing application dependencies.

Provides a clean way to manage CLI-level dependencies like settings and
registry clients, avoiding global state and enabling dependency injection.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from .settings import Settings, create_settings_from_env
from .storage.oci_registry import OciRegistry


@dataclass
class CLIContext:
    """
    Shared context for CLI commands.

    Holds the settings for one command execution and creates registry
    clients on demand, one per hostname.
    """
    settings: Settings
    _registries: Dict[str, OciRegistry] = field(default_factory=dict)

    @classmethod
    def from_env(cls, *, insecure: Optional[bool] = None, plain_http: Optional[bool] = None,
                 username: Optional[str] = None, password: Optional[str] = None) -> CLIContext:
        """
        Create CLI context from environment variables and CLI overrides.

        Flags left at ``None`` keep the environment-derived value.

        Returns:
            CLIContext with validated settings
        """
        settings = create_settings_from_env().with_overrides(
            registry_insecure=insecure,
            registry_plain_http=plain_http,
            registry_user=username,
            registry_pass=password,
        )
        return cls(settings=settings)

    def registry(self, hostname: str) -> OciRegistry:
        """
        Get or create the registry client for ``hostname``.

        Returns:
            RegistryHTTP instance reused for the rest of the command
        """
        if hostname not in self._registries:
            from .storage.registry_http import RegistryHTTP
            self._registries[hostname] = RegistryHTTP(hostname, self.settings)
        return self._registries[hostname]

    def close(self) -> None:
        """Close every registry client created for this command."""
        for registry in self._registries.values():
            registry.close()
        self._registries.clear()
