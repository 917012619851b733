"""Exceptions raised for registry misuse.

Routine lookup misses are reported as ``None`` or empty values, never as
exceptions.
"""

from __future__ import annotations

from typing import Iterable, List, Optional


class LocusError(Exception):
    """Base class for errors a caller is expected to fix."""


class InvalidAliasError(LocusError, ValueError):
    """Raised for an alias that is too short or an empty instance key."""


class DirectoryNotFoundError(LocusError, FileNotFoundError):
    """Raised when a root directory does not exist."""


class RootNotSetError(LocusError, RuntimeError):
    """Raised when a root-relative operation runs before ``set_root``."""


class ConfigError(LocusError, ValueError):
    """Raised when a registry manifest cannot be loaded or fails validation."""

    def __init__(self, message: str, errors: Optional[Iterable[str]] = None) -> None:
        super().__init__(message)
        self.errors: List[str] = list(errors or [])


__all__ = [
    "ConfigError",
    "DirectoryNotFoundError",
    "InvalidAliasError",
    "LocusError",
    "RootNotSetError",
]
