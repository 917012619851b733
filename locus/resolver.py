"""Lookup of alias-qualified references against registered directories."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Optional

from locus.core import Reference, VirtualReference, clean, has_parent_token, unify
from locus.probe import FilesystemProbe

if TYPE_CHECKING:  # pragma: no cover
    from locus.registry import AliasRegistry

_LOGGER = logging.getLogger("locus.resolver")


class Resolver:
    """Turn references into existing filesystem paths."""

    def __init__(self, registry: "AliasRegistry", probe: FilesystemProbe) -> None:
        self._registry = registry
        self.probe = probe

    def get(self, source: str) -> Optional[str]:
        """Return the first existing path for *source*, in candidate order.

        A source without a colon is looked up under the default alias.
        """

        alias, subpath = self._registry.parse(source)
        return self.lookup(VirtualReference(alias=alias, subpath=subpath))

    def lookup(self, reference: VirtualReference) -> Optional[str]:
        """Return the first candidate of ``reference.alias`` holding its subpath.

        ``None`` is returned when the alias is unknown or no candidate holds
        the requested subpath.
        """

        for candidate in self._registry.paths_for(reference.alias):
            full_path = clean(f"{candidate}/{reference.subpath}")
            if self.probe.exists(full_path):
                _LOGGER.debug("Resolved %s -> %s", reference, full_path)
                return full_path
        _LOGGER.debug("No candidate of alias '%s' holds '%s'", reference.alias, reference.subpath)
        return None

    def resolve_reference(self, reference: Reference, separator: str = os.sep) -> Optional[str]:
        """Resolve a classified reference.

        Virtual references go through :meth:`lookup`. Literal paths ending in
        ``..`` must exist and are canonicalized. Any other literal path is
        cleaned without touching the filesystem.
        """

        if isinstance(reference, VirtualReference):
            return self.lookup(reference)

        path = reference.path
        if has_parent_token(path):
            canonical = self.probe.canonicalize(unify(path, "/"))
            if canonical is None:
                _LOGGER.debug("Cannot canonicalize '%s'; skipping", path)
            return canonical

        return clean(path, separator)

    def resolve_add_path(self, path: str, separator: str = os.sep) -> Optional[str]:
        """Classify *path* against the registry, then resolve it."""

        return self.resolve_reference(self._registry.reference(path), separator)


__all__ = ["Resolver"]
