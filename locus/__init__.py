"""locus: resolve alias-qualified paths against ordered candidate directories."""

from .core import DEFAULT_ALIAS, LiteralReference, VirtualReference, clean, is_virtual, parse, prefix
from .exceptions import (
    ConfigError,
    DirectoryNotFoundError,
    InvalidAliasError,
    LocusError,
    RootNotSetError,
)
from .probe import FilesystemProbe, OSFilesystemProbe
from .registry import MODE_APPEND, MODE_PREPEND, MODE_RESET, AliasRegistry, RegistryTable
from .resolver import Resolver
from .uri import EnvironmentBaseUrl, StaticBaseUrl, UriBuilder

__all__ = [
    "AliasRegistry",
    "ConfigError",
    "DEFAULT_ALIAS",
    "DirectoryNotFoundError",
    "EnvironmentBaseUrl",
    "FilesystemProbe",
    "InvalidAliasError",
    "LiteralReference",
    "LocusError",
    "MODE_APPEND",
    "MODE_PREPEND",
    "MODE_RESET",
    "OSFilesystemProbe",
    "RegistryTable",
    "Resolver",
    "RootNotSetError",
    "StaticBaseUrl",
    "UriBuilder",
    "VirtualReference",
    "clean",
    "is_virtual",
    "parse",
    "prefix",
]
