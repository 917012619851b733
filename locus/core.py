"""Core string helpers for separator handling and alias-qualified references."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple, Union

DEFAULT_ALIAS = "default"
MIN_ALIAS_LENGTH = 3

_SEPARATOR_RUN = re.compile(r"[\\/]+")
_PREFIX_PATTERN = re.compile(r"^(?P<prefix>([a-zA-Z]+:)?//?)")
_PARENT_TOKEN = re.compile(r"(/\.\.$|/\.\./$)")
_DRIVE_LETTER = re.compile(r"^[a-zA-Z]$")


@dataclass(frozen=True)
class VirtualReference:
    """An ``alias:subpath`` reference resolved against registered directories."""

    alias: str
    subpath: str

    def __str__(self) -> str:
        return f"{self.alias}:{self.subpath}"


@dataclass(frozen=True)
class LiteralReference:
    """A plain filesystem path, relative or absolute."""

    path: str

    def __str__(self) -> str:
        return self.path


Reference = Union[VirtualReference, LiteralReference]


def unify(path: str, separator: str = "/") -> str:
    """Collapse every run of ``/`` and ``\\`` in *path* into *separator*."""

    if not path:
        return ""
    return _SEPARATOR_RUN.sub(lambda _: separator, path.strip())


def prefix(path: str) -> Optional[str]:
    """Return the absolute-path prefix of *path* (``/``, ``C:/``) or ``None``."""

    match = _PREFIX_PATTERN.match(unify(path, "/"))
    if match:
        return match.group("prefix")
    return None


def clean(path: str, separator: str = "/") -> str:
    """Normalize *path*: unify separators and collapse ``.`` and ``..`` segments.

    A detected prefix is kept at the head of the result. ``..`` segments that
    would climb above the first retained segment are dropped, and so are
    whitespace-only segments.
    """

    unified = unify(path, "/")
    head = prefix(unified) or ""
    tokens = []
    for part in unified[len(head):].split("/"):
        if not part.strip() or part == ".":
            continue
        if part == "..":
            if tokens:
                tokens.pop()
            continue
        tokens.append(part)

    result = head.replace("/", separator) + separator.join(tokens)
    stripped = result.strip()
    if stripped != result:
        # popped segments can leave whitespace at either end of the result
        return clean(stripped, separator)
    return result


def has_parent_token(path: str) -> bool:
    """Return True when *path* ends with a ``..`` segment."""

    return _PARENT_TOKEN.search(unify(path, "/")) is not None


def is_virtual(path: str, known_aliases: Iterable[str] = ()) -> bool:
    """Return True when *path* uses the ``alias:subpath`` syntax.

    ``C:/dir`` and ``/dir`` look absolute, so they only count as virtual when
    the part before the colon is one of *known_aliases*. A single letter
    before the colon is always a drive letter.
    """

    if not path or ":" not in path:
        return False
    alias = path.split(":", 1)[0]
    if not alias or _DRIVE_LETTER.match(alias):
        return False
    if prefix(path) is not None and alias not in set(known_aliases):
        return False
    return True


def parse(source: str, default_alias: str = DEFAULT_ALIAS) -> Tuple[str, str]:
    """Split *source* into ``(alias, subpath)``.

    Without a colon the whole string is the subpath of *default_alias*.
    Leading separators are removed from the subpath.
    """

    source = source or ""
    if ":" in source:
        alias, subpath = source.split(":", 1)
    else:
        alias, subpath = default_alias, source
    return alias, subpath.lstrip("\\/")


def to_reference(
    source: str,
    known_aliases: Iterable[str] = (),
    default_alias: str = DEFAULT_ALIAS,
) -> Reference:
    """Classify *source* once as a virtual or a literal reference."""

    if is_virtual(source, known_aliases):
        alias, subpath = parse(source, default_alias)
        return VirtualReference(alias=alias, subpath=subpath)
    return LiteralReference(path=source)


__all__ = [
    "DEFAULT_ALIAS",
    "LiteralReference",
    "MIN_ALIAS_LENGTH",
    "Reference",
    "VirtualReference",
    "clean",
    "has_parent_token",
    "is_virtual",
    "parse",
    "prefix",
    "to_reference",
    "unify",
]
