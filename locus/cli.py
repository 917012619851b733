"""Command line entry point for locus."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, Optional

from locus.config import Settings, build_table, load_env_file, load_settings
from locus.exceptions import ConfigError, LocusError
from locus.registry import AliasRegistry
from locus.uri import EnvironmentBaseUrl, StaticBaseUrl, UriBuilder

_LOGGER = logging.getLogger("locus.cli")


def _configure_logging(level_name: str) -> None:
    level = getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Resolve alias-qualified paths")
    parser.add_argument("--config", help="JSON manifest path (default: LOCUS_CONFIG)")
    parser.add_argument("--instance", help="Registry instance key (default: LOCUS_INSTANCE or 'default')")
    parser.add_argument("--root", help="Root directory for URNs (default: LOCUS_ROOT)")
    parser.add_argument("--base-url", dest="base_url", help="Base URL for URIs (default: LOCUS_BASE_URL)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    resolve_parser = subparsers.add_parser("resolve", help="Resolve a reference to an existing path")
    resolve_parser.add_argument("source", help="Reference such as 'default:file.txt'")

    paths_parser = subparsers.add_parser("paths", help="List the candidate directories of an alias")
    paths_parser.add_argument("source", help="Alias reference such as 'default:'")

    urn_parser = subparsers.add_parser("urn", help="Print a path relative to the root")
    urn_parser.add_argument("path", help="Virtual reference or filesystem path")
    urn_parser.add_argument("--exists", action="store_true", help="Require the target to exist")

    uri_parser = subparsers.add_parser("uri", help="Print the URL of a file below the root")
    uri_parser.add_argument("source", help="Virtual reference or filesystem path, optional ?query")

    subparsers.add_parser("check", help="Validate configuration and summarise registries")
    return parser


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    if args.config:
        settings.config_path = args.config
    if args.instance:
        settings.instance = args.instance
    if args.root:
        settings.root = args.root
    if args.base_url:
        settings.base_url = args.base_url
    return settings


def _summary(registry: AliasRegistry) -> Dict[str, Any]:
    return {
        "root": registry.get_root() if registry.has_root else None,
        "aliases": {alias: registry.paths_for(alias) for alias in registry.aliases()},
    }


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for the locus CLI."""

    load_env_file()
    parser = _build_parser()
    args = parser.parse_args(argv)
    settings = _apply_overrides(load_settings(), args)
    _configure_logging(settings.log_level)

    try:
        table = build_table(settings)
    except ConfigError as exc:
        _LOGGER.error("Invalid configuration: %s", exc)
        for detail in exc.errors:
            _LOGGER.error("  - %s", detail)
        return 1
    except LocusError as exc:
        _LOGGER.error("Failed to build registry: %s", exc)
        return 1

    registry = table.get_or_create(settings.instance)
    base_url = StaticBaseUrl(settings.base_url) if settings.base_url else EnvironmentBaseUrl()
    builder = UriBuilder(registry, base_url)

    try:
        if args.command == "resolve":
            resolved = registry.get(args.source)
            if resolved is None:
                _LOGGER.error("Unresolved reference: %s", args.source)
                return 1
            print(resolved)
            return 0

        if args.command == "paths":
            print(json.dumps(registry.get_paths(args.source), indent=2))
            return 0

        if args.command == "urn":
            urn = builder.urn(args.path, require_exists=args.exists)
            if not urn:
                _LOGGER.error("No URN for %s", args.path)
                return 1
            print(urn)
            return 0

        if args.command == "uri":
            url = builder.uri(args.source)
            if url is None:
                _LOGGER.error("No URI for %s", args.source)
                return 1
            print(url)
            return 0

        if args.command == "check":
            payload = {key: _summary(table.get_or_create(key)) for key in table.keys()}
            print(json.dumps(payload, indent=2, sort_keys=True))
            return 0
    except LocusError as exc:
        _LOGGER.error("%s", exc)
        return 1

    parser.error("Unknown command")
    return 2


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
