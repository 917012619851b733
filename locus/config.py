"""Configuration loading: environment, ``.env`` files and JSON manifests."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from dotenv import load_dotenv
from jsonschema import Draft202012Validator

from locus.core import DEFAULT_ALIAS, MIN_ALIAS_LENGTH
from locus.exceptions import ConfigError
from locus.probe import FilesystemProbe
from locus.registry import MODE_APPEND, MODE_PREPEND, MODE_RESET, AliasRegistry, RegistryTable

_LOGGER = logging.getLogger("locus.config")

_ALIAS_ENTRY_SCHEMA: Dict[str, Any] = {
    "oneOf": [
        {"type": "array", "items": {"type": "string", "minLength": 1}},
        {
            "type": "object",
            "properties": {
                "paths": {"type": "array", "items": {"type": "string", "minLength": 1}},
                "mode": {"enum": [MODE_PREPEND, MODE_APPEND, MODE_RESET]},
            },
            "required": ["paths"],
            "additionalProperties": False,
        },
    ]
}

_INSTANCE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "root": {"type": "string", "minLength": 1},
        "aliases": {
            "type": "object",
            "propertyNames": {"minLength": MIN_ALIAS_LENGTH},
            "additionalProperties": _ALIAS_ENTRY_SCHEMA,
        },
    },
    "additionalProperties": False,
}

MANIFEST_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "locus registry manifest",
    "type": "object",
    "properties": {
        "root": _INSTANCE_SCHEMA["properties"]["root"],
        "aliases": _INSTANCE_SCHEMA["properties"]["aliases"],
        "instances": {
            "type": "object",
            "propertyNames": {"minLength": 1},
            "additionalProperties": _INSTANCE_SCHEMA,
        },
    },
    "additionalProperties": False,
}


@dataclass
class Settings:
    """Effective configuration gathered from the environment."""

    config_path: Optional[str] = None
    root: Optional[str] = None
    base_url: Optional[str] = None
    default_paths: List[str] = field(default_factory=list)
    instance: str = DEFAULT_ALIAS
    event_log: Optional[str] = None
    log_level: str = "INFO"


def _env(name: str, environ: Mapping[str, str]) -> Optional[str]:
    value = environ.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def load_env_file(path: Optional[str] = None) -> bool:
    """Load ``.env`` values without overriding variables that are already set."""

    env_path = path or os.getenv("LOCUS_ENV_FILE") or os.path.join(os.getcwd(), ".env")
    loaded = load_dotenv(dotenv_path=env_path, override=False)
    if loaded:
        _LOGGER.debug("Loaded environment from %s", env_path)
    return loaded


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build :class:`Settings` from ``LOCUS_*`` variables."""

    env = environ if environ is not None else os.environ
    raw_paths = _env("LOCUS_PATHS", env) or ""
    return Settings(
        config_path=_env("LOCUS_CONFIG", env),
        root=_env("LOCUS_ROOT", env),
        base_url=_env("LOCUS_BASE_URL", env),
        default_paths=[chunk for chunk in raw_paths.split(os.pathsep) if chunk.strip()],
        instance=_env("LOCUS_INSTANCE", env) or DEFAULT_ALIAS,
        event_log=_env("LOCUS_EVENT_LOG", env),
        log_level=(_env("LOCUS_LOG_LEVEL", env) or "INFO").upper(),
    )


def validate_manifest(manifest: Any) -> List[str]:
    """Return human readable schema violations for *manifest* (empty when valid)."""

    validator = Draft202012Validator(MANIFEST_SCHEMA)
    errors = []
    raw_errors = validator.iter_errors(manifest)
    for error in sorted(raw_errors, key=lambda item: [str(part) for part in item.absolute_path]):
        location = "/".join(str(part) for part in error.absolute_path) or "<root>"
        errors.append(f"{location}: {error.message}")
    return errors


def load_manifest(path: str) -> Dict[str, Any]:
    """Read and validate the JSON manifest at *path*."""

    try:
        with open(path, "r", encoding="utf-8") as handle:
            manifest = json.load(handle)
    except OSError as exc:
        raise ConfigError(f"cannot read manifest {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"manifest {path} is not valid JSON: {exc}") from exc

    errors = validate_manifest(manifest)
    if errors:
        raise ConfigError(f"manifest {path} failed validation", errors)
    return manifest


def _manifest_instances(manifest: Mapping[str, Any]) -> List[Tuple[str, Mapping[str, Any]]]:
    instances: List[Tuple[str, Mapping[str, Any]]] = []
    shorthand = {key: manifest[key] for key in ("root", "aliases") if key in manifest}
    if shorthand:
        instances.append((DEFAULT_ALIAS, shorthand))
    for key, block in (manifest.get("instances") or {}).items():
        instances.append((key, block))
    return instances


def apply_instance(registry: AliasRegistry, block: Mapping[str, Any]) -> None:
    """Register the aliases and root described by one manifest *block*."""

    for alias, entry in (block.get("aliases") or {}).items():
        if isinstance(entry, Mapping):
            paths = entry.get("paths", [])
            mode = entry.get("mode", MODE_APPEND)
        else:
            paths, mode = entry, MODE_APPEND
        registry.add(paths, alias, mode)

    root = block.get("root")
    if root and not registry.has_root:
        registry.set_root(root)


def build_table(
    settings: Settings,
    *,
    probe: Optional[FilesystemProbe] = None,
    manifest: Optional[Mapping[str, Any]] = None,
) -> RegistryTable:
    """Create a :class:`RegistryTable` populated from *settings* and the manifest."""

    table = RegistryTable(probe=probe, event_log=settings.event_log)
    if manifest is None and settings.config_path:
        manifest = load_manifest(settings.config_path)

    # Environment values take precedence: roots are write-once.
    registry = table.get_or_create(settings.instance)
    if settings.root:
        registry.set_root(settings.root)

    for key, block in _manifest_instances(manifest or {}):
        apply_instance(table.get_or_create(key), block)

    if settings.default_paths:
        registry.add(settings.default_paths, DEFAULT_ALIAS, MODE_APPEND)
    return table


__all__ = [
    "MANIFEST_SCHEMA",
    "Settings",
    "apply_instance",
    "build_table",
    "load_env_file",
    "load_manifest",
    "load_settings",
    "validate_manifest",
]
