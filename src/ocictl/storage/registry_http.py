"""
Registry HTTP Client for the OCI Distribution API.

Provides the registry calls ocictl needs: catalog listing, manifest
resolution and verified content fetch, with the Docker Registry v2
Bearer/Basic auth flow.
"""
from __future__ import annotations

import base64
import binascii
import json
import logging
import re
import time
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple
from urllib.parse import urljoin

import httpx
from pydantic import ValidationError
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..models import ACCEPTED_MANIFEST_TYPES, CatalogPage, Descriptor, digest_of
from ..settings import Settings
from .oci_errors import (
    OciAuthError,
    OciDigestMismatch,
    OciError,
    OciNotFound,
    OciRateLimited,
    OciSizeMismatch,
    OciUnsupportedMediaType,
)

__all__ = ["DockerAuth", "RegistryHTTP"]

logger = logging.getLogger(__name__)

USER_AGENT = "ocictl/0.1.0"


class DockerAuth:
    """Handle registry credentials from the Docker config file."""

    def __init__(self, config_dir: Optional[str] = None):
        base = Path(config_dir) if config_dir else Path.home() / ".docker"
        self.config_path = base / "config.json"
        self._config_cache: Optional[dict] = None
        self._config_mtime: Optional[float] = None

    def get_credentials(self, registry: str) -> Optional[Tuple[str, str]]:
        """
        Get credentials for registry from Docker config.

        Returns: (username, password) or None if not found
        """
        config = self._load_config()
        if not config:
            return None

        auths = config.get("auths", {})
        host = registry.replace("https://", "").replace("http://", "")
        for key in (registry, host, f"https://{host}"):
            if key in auths:
                auth_entry = auths[key]
                break
        else:
            return None

        # Handle base64 encoded auth field
        if "auth" in auth_entry:
            try:
                decoded = base64.b64decode(auth_entry["auth"]).decode()
            except (binascii.Error, UnicodeDecodeError):
                logger.debug(f"Ignoring undecodable auth entry for {host}")
            else:
                if ":" in decoded:
                    username, password = decoded.split(":", 1)
                    return username, password

        if "username" in auth_entry and "password" in auth_entry:
            return auth_entry["username"], auth_entry["password"]

        return None

    def _load_config(self) -> Optional[dict]:
        """Load Docker config with caching and mtime checking."""
        if not self.config_path.exists():
            return None

        try:
            current_mtime = self.config_path.stat().st_mtime

            # Use cached version if file hasn't changed
            if self._config_cache is not None and current_mtime == self._config_mtime:
                return self._config_cache

            with open(self.config_path, 'r') as f:
                config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.debug(f"Could not read Docker config {self.config_path}: {e}")
            return None

        self._config_cache = config
        self._config_mtime = current_mtime
        return config


class RegistryHTTP:
    """
    HTTP client for OCI Distribution API operations.

    One instance talks to one registry host. Failed HTTP statuses are mapped
    to the Oci* error taxonomy; timeouts are retried ``settings.http_retry``
    times with exponential backoff.
    """

    def __init__(self, registry: str, settings: Settings, auth: Optional[DockerAuth] = None,
                 transport: Optional[httpx.BaseTransport] = None):
        """
        Initialize registry HTTP client.

        Args:
            registry: Registry hostname (e.g., "localhost:5000", "ghcr.io")
            settings: Connection settings
            auth: Docker auth handler (defaults to the configured Docker config)
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        self.registry = registry
        self.settings = settings
        self.auth = auth or DockerAuth(settings.docker_config)

        if registry.startswith(("http://", "https://")):
            self.base_url = registry
        elif settings.registry_plain_http:
            self.base_url = f"http://{registry}"
        else:
            self.base_url = f"https://{registry}"

        self.client = httpx.Client(
            timeout=httpx.Timeout(settings.http_timeout_s),
            follow_redirects=True,
            verify=not settings.registry_insecure,
            headers={"User-Agent": USER_AGENT},
            transport=transport,
        )

        # Token cache: {service:scope: (token, expiry_timestamp)}
        self._token_cache: Dict[str, Tuple[str, float]] = {}

        logger.debug(
            f"Registry client for {self.base_url} (timeout: {settings.http_timeout_s}s, "
            f"retry: {settings.http_retry}, insecure: {settings.registry_insecure})"
        )

    def repositories(self, last: str = "") -> Iterator[List[str]]:
        """
        Iterate the registry catalog, one batch per server page.

        Follows ``Link: <...>; rel="next"`` headers until the registry stops
        returning one.

        Args:
            last: Resume listing after this repository name

        Yields:
            Repository names of one catalog page, in registry order

        Raises:
            OciAuthError: If authentication fails
            OciNotFound: If the registry does not serve a catalog
            OciError: For other registry errors
        """
        url = "/v2/_catalog"
        params: Optional[dict] = {"n": self.settings.catalog_page_size}
        if last:
            params["last"] = last

        while url:
            response = self._call("GET", url, "listing catalog", params=params)
            try:
                body = response.json()
            except json.JSONDecodeError as e:
                raise OciError(f"Invalid JSON in catalog response: {e}") from e

            try:
                repos = CatalogPage.model_validate(body, strict=True).names
            except ValidationError as e:
                raise OciError("Invalid catalog response: expected an object with a repositories list of strings") from e
            logger.debug(f"Catalog page with {len(repos)} repositories")
            yield repos

            # The next link already carries last/n in its query string
            url = response.links.get("next", {}).get("url")
            params = None

    def resolve(self, repo: str, ref: str) -> Descriptor:
        """
        Resolve tag or digest to the manifest descriptor.

        Uses HEAD and falls back to GET when the registry omits the digest
        or length headers.

        Args:
            repo: Repository path
            ref: Tag or digest reference

        Returns:
            Manifest descriptor

        Raises:
            OciNotFound: If manifest doesn't exist
            OciUnsupportedMediaType: If manifest media type is not accepted
            OciError: For other registry errors
        """
        url = f"/v2/{repo}/manifests/{ref}"
        headers = {"Accept": ", ".join(ACCEPTED_MANIFEST_TYPES)}
        what = f"resolving {repo}:{ref}"

        response = self._call("HEAD", url, what, headers=headers)
        digest = response.headers.get("Docker-Content-Digest")
        length = response.headers.get("Content-Length")

        if not digest or length is None:
            logger.debug(f"HEAD {repo}:{ref} lacks digest or length headers, falling back to GET")
            response = self._call("GET", url, what, headers=headers)
            digest = digest or digest_of(response.content)
            length = len(response.content)

        media_type = response.headers.get("Content-Type", "").split(";", 1)[0].strip()
        if media_type not in ACCEPTED_MANIFEST_TYPES:
            raise OciUnsupportedMediaType(
                f"Unsupported manifest media type: {media_type or '<none>'}. "
                f"Expected one of: {', '.join(ACCEPTED_MANIFEST_TYPES)}"
            )

        return Descriptor(media_type=media_type, digest=digest, size=int(length))

    def fetch_all(self, repo: str, descriptor: Descriptor) -> bytes:
        """
        Fetch manifest content by descriptor and verify it.

        Args:
            repo: Repository path
            descriptor: Manifest descriptor

        Returns:
            Raw manifest bytes

        Raises:
            OciNotFound: If manifest doesn't exist
            OciSizeMismatch: If the content length differs from descriptor.size
            OciDigestMismatch: If the content doesn't hash to descriptor.digest
            OciError: For other registry errors
        """
        url = f"/v2/{repo}/manifests/{descriptor.digest}"
        headers = {"Accept": descriptor.media_type}
        response = self._call("GET", url, f"fetching {repo}@{descriptor.digest}", headers=headers)
        content = response.content

        if len(content) != descriptor.size:
            raise OciSizeMismatch(
                f"Size mismatch for {descriptor.digest}: expected {descriptor.size}, got {len(content)}",
                expected=descriptor.size,
                actual=len(content),
            )

        if descriptor.digest.startswith("sha256:"):
            actual = digest_of(content)
            if actual != descriptor.digest:
                raise OciDigestMismatch(
                    f"Digest mismatch: expected {descriptor.digest}, got {actual}",
                    expected=descriptor.digest,
                    actual=actual,
                )

        return content

    def _call(self, method: str, path: str, what: str, **kwargs) -> httpx.Response:
        """Issue a request and map failures to Oci* errors."""
        try:
            return self._request(method, path, **kwargs)
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status in (401, 403):
                raise OciAuthError(f"Authentication failed {what} (HTTP {status})") from e
            if status == 404:
                raise OciNotFound(f"Not found {what}") from e
            if status == 429:
                raise OciRateLimited(f"Rate limited {what}") from e
            raise OciError(f"Registry error {status} {what}") from e
        except httpx.RequestError as e:
            raise OciError(f"Network error {what}: {e}") from e

    def _request(self, method: str, path: str, headers: Optional[dict] = None, **kwargs) -> httpx.Response:
        """
        Make HTTP request with transparent auth flow and timeout retries.

        Handles 401 responses by:
        1. Parsing WWW-Authenticate header for the challenge scheme
        2. Looking up credentials in settings or Docker config
        3. For Bearer: exchanging credentials for a token (cached per service/scope)
        4. Retrying the original request once with the Authorization header
        """
        retrying = Retrying(
            stop=stop_after_attempt(self.settings.http_retry + 1),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception_type(httpx.TimeoutException),
            reraise=True,
        )
        for attempt in retrying:
            with attempt:
                response = self._send(method, path, dict(headers or {}), **kwargs)
        return response

    def _send(self, method: str, path: str, headers: dict, **kwargs) -> httpx.Response:
        url = urljoin(self.base_url, path)
        response = self.client.request(method, url, headers=headers, **kwargs)

        if response.status_code == 401:
            challenge = response.headers.get("WWW-Authenticate", "")
            authorization = self._authorize(challenge)
            if authorization:
                headers["Authorization"] = authorization
                response = self.client.request(method, url, headers=headers, **kwargs)

        response.raise_for_status()
        return response

    def _credentials(self) -> Optional[Tuple[str, str]]:
        if self.settings.registry_user and self.settings.registry_pass:
            return self.settings.registry_user, self.settings.registry_pass
        return self.auth.get_credentials(self.registry)

    def _authorize(self, challenge: str) -> Optional[str]:
        """Build an Authorization header value answering ``challenge``."""
        creds = self._credentials()
        scheme = challenge.split(" ", 1)[0].lower()

        if scheme == "basic":
            if not creds:
                return None
            token = base64.b64encode(f"{creds[0]}:{creds[1]}".encode()).decode()
            return f"Basic {token}"

        if scheme == "bearer":
            token = self._bearer_token(challenge, creds)
            return f"Bearer {token}" if token else None

        return None

    def _bearer_token(self, challenge: str, creds: Optional[Tuple[str, str]]) -> Optional[str]:
        """
        Handle Bearer token authentication flow.

        Anonymous token requests are made when no credentials are configured,
        which public registries accept for pull scopes.
        """
        # Format: Bearer realm="...",service="...",scope="..."
        params = {m.group(1): m.group(2) for m in re.finditer(r'(\w+)="([^"]*)"', challenge)}
        realm = params.get("realm")
        service = params.get("service")
        scope = params.get("scope")

        if not realm:
            return None

        cache_key = f"{service or ''}:{scope or ''}"
        if cache_key in self._token_cache:
            token, expiry = self._token_cache[cache_key]
            if time.time() < expiry - 30:  # 30s buffer before expiry
                return token

        query = {key: value for key, value in (("service", service), ("scope", scope)) if value}
        try:
            auth_response = self.client.get(realm, params=query, auth=creds)
            auth_response.raise_for_status()
            token_data = auth_response.json()
        except (httpx.HTTPError, json.JSONDecodeError) as e:
            logger.debug(f"Token exchange with {realm} failed: {e}")
            return None

        token = token_data.get("token") or token_data.get("access_token")
        if not token:
            return None

        expires_in = token_data.get("expires_in", 3600)
        self._token_cache[cache_key] = (token, time.time() + expires_in)
        return token

    def close(self):
        """Close HTTP client."""
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
