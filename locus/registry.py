"""Alias registries: ordered candidate directories per alias plus a root."""

from __future__ import annotations

import logging
import threading
from typing import Dict, Iterable, List, Optional, Tuple, Union

from locus.core import (
    DEFAULT_ALIAS,
    MIN_ALIAS_LENGTH,
    Reference,
    clean,
    is_virtual,
    parse,
    prefix,
    to_reference,
    unify,
)
from locus.exceptions import DirectoryNotFoundError, InvalidAliasError, RootNotSetError
from locus.logging import log_event
from locus.probe import FilesystemProbe, OSFilesystemProbe
from locus.resolver import Resolver

_LOGGER = logging.getLogger("locus.registry")

MODE_PREPEND = "prepend"
MODE_APPEND = "append"
MODE_RESET = "reset"
_VALID_MODES = {MODE_PREPEND, MODE_APPEND, MODE_RESET}

PathsArg = Union[str, Iterable[str]]
IndexArg = Union[int, float, str, Iterable[Union[int, float, str]]]


def _as_list(value: Union[str, Iterable, None]) -> list:
    if value is None:
        return []
    if isinstance(value, (str, bytes, int, float)):
        return [value]
    return list(value)


def _slot(value: Union[int, float, str]) -> Optional[int]:
    """Coerce a slot index; non-numeric values yield ``None``."""

    if isinstance(value, (int, float)):
        candidate = value
    else:
        try:
            candidate = float(str(value).strip())
        except ValueError:
            return None
    try:
        return int(candidate)
    except (ValueError, OverflowError):
        return None


class AliasRegistry:
    """Hold the candidate directories of each alias for one named instance.

    Each alias maps to an ordered ``{slot: path}`` dict. Prepending renumbers
    the slots from zero, appending takes the next free slot, and removal
    leaves gaps, so slot numbers stay stable between removals.
    """

    def __init__(
        self,
        key: str = DEFAULT_ALIAS,
        *,
        probe: Optional[FilesystemProbe] = None,
        event_log: Optional[str] = None,
    ) -> None:
        if not isinstance(key, str) or not key:
            raise InvalidAliasError("Invalid registry key: key must be a non-empty string")
        self.key = key
        self.probe = probe or OSFilesystemProbe()
        self.event_log = event_log
        self.resolver = Resolver(self, self.probe)
        self._paths: Dict[str, Dict[int, str]] = {}
        self._root: Optional[str] = None
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return f"AliasRegistry(key={self.key!r}, aliases={self.aliases()!r})"

    # -- parsing -----------------------------------------------------------

    def parse(self, source: str) -> Tuple[str, str]:
        return parse(source, DEFAULT_ALIAS)

    def is_virtual(self, path: str) -> bool:
        """Return True when *path* is an ``alias:subpath`` reference."""

        return is_virtual(path, self.aliases())

    def reference(self, source: str) -> Reference:
        return to_reference(source, self.aliases(), DEFAULT_ALIAS)

    # -- alias table -------------------------------------------------------

    def aliases(self) -> List[str]:
        with self._lock:
            return list(self._paths)

    def paths_for(self, alias: str) -> List[str]:
        with self._lock:
            return list(self._paths.get(alias, {}).values())

    def get_paths(self, source: str) -> List[str]:
        """Return the candidate directories registered for the alias of *source*."""

        alias, _ = self.parse(source)
        return self.paths_for(alias)

    def entries(self, source: str) -> Dict[int, str]:
        """Return a copy of the ``{slot: path}`` map for the alias of *source*."""

        alias, _ = self.parse(source)
        with self._lock:
            return dict(self._paths.get(alias, {}))

    def add(self, paths: PathsArg, alias: str = DEFAULT_ALIAS, mode: str = MODE_PREPEND) -> None:
        """Register one or more candidate directories under *alias*.

        Virtual entries are resolved against the current table and skipped when
        they do not resolve. Entries ending in ``..`` must exist. Duplicates
        are ignored.
        """

        if not isinstance(alias, str) or len(alias) < MIN_ALIAS_LENGTH:
            raise InvalidAliasError(
                f"The minimum number of characters is {MIN_ALIAS_LENGTH} (alias: {alias!r})"
            )
        if mode not in _VALID_MODES:
            raise ValueError(f"unsupported add mode: {mode}")

        items = _as_list(paths)
        with self._lock:
            if mode == MODE_RESET:
                added = self._reset(alias, items)
            else:
                added = [path for path in (self._add_one(alias, item, mode) for item in items) if path]

        log_event(
            "add",
            path=self.event_log,
            instance=self.key,
            alias=alias,
            mode=mode,
            paths=added,
        )

    def _reset(self, alias: str, items: List[str]) -> List[str]:
        slots: Dict[int, str] = {}
        for item in items:
            path = clean(item, "/")
            if path not in slots.values():
                slots[len(slots)] = path
        self._paths[alias] = slots
        _LOGGER.debug("Reset alias '%s' to %s", alias, list(slots.values()))
        return list(slots.values())

    def _add_one(self, alias: str, item: str, mode: str) -> Optional[str]:
        slots = self._paths.setdefault(alias, {})
        normalized = unify(item, "/")
        if normalized in slots.values():
            return None

        resolved = self.resolver.resolve_add_path(normalized, "/")
        if resolved is None:
            _LOGGER.debug("Skipping unresolved path '%s' for alias '%s'", item, alias)
            return None
        if resolved in slots.values():
            return None

        if mode == MODE_PREPEND:
            ordered = [resolved] + list(slots.values())
            self._paths[alias] = dict(enumerate(ordered))
        else:
            slot = max(slots) + 1 if slots else 0
            slots[slot] = resolved
        _LOGGER.debug("Registered '%s' for alias '%s' (%s)", resolved, alias, mode)
        return resolved

    def remove(self, source: str, indices: IndexArg) -> bool:
        """Remove the given slots from the alias of *source*.

        Returns True when the alias is registered and non-empty, whether or not
        any of *indices* matched a slot; False for an unknown or empty alias.
        Numeric strings such as ``"1.0"`` are coerced; other values are skipped.
        """

        requested = _as_list(indices)
        keys = [slot for slot in (_slot(value) for value in requested) if slot is not None]
        if len(keys) != len(requested):
            _LOGGER.debug("Ignoring non-numeric slot indices in %s", requested)
        alias, _ = self.parse(source)
        with self._lock:
            slots = self._paths.get(alias)
            if not slots or not keys:
                _LOGGER.warning("Nothing to remove for alias '%s'", alias)
                return False
            removed = [key for key in keys if slots.pop(key, None) is not None]

        _LOGGER.debug("Removed slots %s from alias '%s'", removed, alias)
        log_event(
            "remove",
            path=self.event_log,
            instance=self.key,
            alias=alias,
            requested=keys,
            removed=removed,
        )
        return True

    # -- root --------------------------------------------------------------

    def set_root(self, directory: str) -> None:
        """Set the root directory used for URNs. Only the first call takes effect."""

        if not self.probe.is_directory(directory):
            raise DirectoryNotFoundError(f"Not found directory: {directory}")

        with self._lock:
            if self._root is not None:
                _LOGGER.warning(
                    "Root for '%s' already set to %s; ignoring %s", self.key, self._root, directory
                )
                return
            if prefix(directory) is None:
                # relative roots are pinned to the directory they name now
                directory = self.probe.canonicalize(directory) or directory
            self._root = clean(directory, "/")
            root = self._root

        _LOGGER.info("Root for '%s' set to %s", self.key, root)
        log_event("set_root", path=self.event_log, instance=self.key, root=root)

    def get_root(self) -> str:
        with self._lock:
            if self._root is None:
                raise RootNotSetError("Please, set the root directory")
            return self._root

    @property
    def has_root(self) -> bool:
        with self._lock:
            return self._root is not None

    # -- resolution --------------------------------------------------------

    def get(self, source: str) -> Optional[str]:
        return self.resolver.get(source)

    def resolve(self, path: str) -> Optional[str]:
        return self.resolver.resolve_add_path(path, "/")


class RegistryTable:
    """Map instance keys to registries; the same key yields the same registry."""

    def __init__(
        self,
        *,
        probe: Optional[FilesystemProbe] = None,
        event_log: Optional[str] = None,
    ) -> None:
        self._probe = probe
        self._event_log = event_log
        self._registries: Dict[str, AliasRegistry] = {}
        self._lock = threading.Lock()

    def get_or_create(self, key: str = DEFAULT_ALIAS) -> AliasRegistry:
        if not isinstance(key, str) or not key:
            raise InvalidAliasError("Invalid registry key: key must be a non-empty string")
        with self._lock:
            registry = self._registries.get(key)
            if registry is None:
                registry = AliasRegistry(key, probe=self._probe, event_log=self._event_log)
                self._registries[key] = registry
                _LOGGER.debug("Created registry '%s'", key)
            return registry

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._registries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._registries

    def __len__(self) -> int:
        with self._lock:
            return len(self._registries)


__all__ = [
    "AliasRegistry",
    "MODE_APPEND",
    "MODE_PREPEND",
    "MODE_RESET",
    "RegistryTable",
]
