"""Root-relative URNs and absolute URLs for registered files."""

from __future__ import annotations

import logging
import os
import re
from typing import Mapping, Optional, Protocol, runtime_checkable

from locus.core import LiteralReference
from locus.registry import AliasRegistry

_LOGGER = logging.getLogger("locus.uri")

_DEFAULT_PORTS = {"http": "80", "https": "443"}


@runtime_checkable
class BaseUrlProvider(Protocol):
    """Supply the scheme and host of the current request, without a trailing slash."""

    def current(self) -> str:
        ...


class StaticBaseUrl:
    """Base URL fixed at construction time."""

    def __init__(self, url: str) -> None:
        if not isinstance(url, str) or not url.strip():
            raise ValueError("base url must be a non-empty string")
        self._url = url.strip().rstrip("/")

    def current(self) -> str:
        return self._url


class EnvironmentBaseUrl:
    """Base URL taken from ``LOCUS_BASE_URL`` or CGI-style request variables."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None) -> None:
        self._environ = environ

    def current(self) -> str:
        env = self._environ if self._environ is not None else os.environ
        explicit = (env.get("LOCUS_BASE_URL") or "").strip()
        if explicit:
            return explicit.rstrip("/")

        https = (env.get("HTTPS") or "").strip().lower()
        scheme = "https" if https and https != "off" else "http"
        host = (env.get("HTTP_HOST") or env.get("SERVER_NAME") or "localhost").strip()
        port = (env.get("SERVER_PORT") or "").strip()
        if port and ":" not in host and port != _DEFAULT_PORTS[scheme]:
            host = f"{host}:{port}"
        return f"{scheme}://{host}"


class UriBuilder:
    """Build URNs relative to a registry root and URLs below a base URL."""

    def __init__(self, registry: AliasRegistry, base_url: Optional[BaseUrlProvider] = None) -> None:
        self.registry = registry
        self.base_url = base_url or EnvironmentBaseUrl()

    def _root_pattern(self) -> "re.Pattern[str]":
        root = self.registry.get_root().rstrip("/")
        return re.compile("^" + re.escape(root) + "(?=/|$)", re.IGNORECASE)

    def is_under_root(self, path: Optional[str]) -> bool:
        """Return True when *path* equals the root or lies below it."""

        if not path:
            return False
        return self._root_pattern().match(path) is not None

    def urn(self, path: str, require_exists: bool = False) -> str:
        """Return *path* relative to the registry root.

        With *require_exists*, a literal path the probe cannot find yields
        ``""``, as does a virtual reference that does not resolve.
        """

        pattern = self._root_pattern()
        reference = self.registry.reference(path)
        subject = self.registry.resolver.resolve_reference(reference, "/")

        if (
            subject is not None
            and require_exists
            and isinstance(reference, LiteralReference)
            and not self.registry.probe.exists(subject)
        ):
            subject = None

        if subject is None:
            return ""
        return pattern.sub("", subject, count=1).lstrip("/")

    def uri(self, source: str) -> Optional[str]:
        """Return the absolute URL of an existing file below the root, else ``None``.

        A ``?query`` suffix on *source* is carried over to the URL.
        """

        # fail on a missing root before any lookup
        self.registry.get_root()
        path, has_query, query = source.partition("?")
        reference = self.registry.reference(path)
        resolved = self.registry.resolver.resolve_reference(reference, "/")
        if not self.is_under_root(resolved):
            _LOGGER.debug("'%s' does not resolve below the root", source)
            return None

        urn = self.urn(resolved, require_exists=True)
        if not urn:
            return None

        url = f"{self.base_url.current().rstrip('/')}/{urn}"
        if has_query:
            url = f"{url}?{query}"
        return url


__all__ = ["BaseUrlProvider", "EnvironmentBaseUrl", "StaticBaseUrl", "UriBuilder"]
