"""Shared pytest fixtures for the locus test suite."""

from __future__ import annotations

import pathlib
import sys
from typing import Iterable, Optional, Set

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from locus.core import clean
from locus.registry import AliasRegistry
from locus.uri import StaticBaseUrl, UriBuilder

BASE_URL = "http://test.dev"


class FakeProbe:
    """In-memory probe: a path exists when it was declared as a file or directory."""

    def __init__(self, files: Iterable[str] = (), directories: Iterable[str] = ()) -> None:
        self.files: Set[str] = {clean(path) for path in files}
        self.directories: Set[str] = {clean(path) for path in directories}
        for path in list(self.files) + list(self.directories):
            parent = path.rsplit("/", 1)[0]
            while parent and parent not in self.directories:
                self.directories.add(parent)
                parent = parent.rsplit("/", 1)[0] if "/" in parent else ""

    def exists(self, path: str) -> bool:
        return path in self.files or path in self.directories

    def canonicalize(self, path: str) -> Optional[str]:
        candidate = clean(path)
        return candidate if self.exists(candidate) else None

    def is_directory(self, path: str) -> bool:
        return clean(path) in self.directories


def _touch(path: pathlib.Path) -> pathlib.Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("", encoding="utf-8")
    return path


@pytest.fixture
def registry() -> AliasRegistry:
    return AliasRegistry("default")


@pytest.fixture
def root_dir(tmp_path: pathlib.Path) -> pathlib.Path:
    root = tmp_path / "www"
    root.mkdir()
    return root


@pytest.fixture
def builder(registry: AliasRegistry, root_dir: pathlib.Path) -> UriBuilder:
    registry.set_root(str(root_dir))
    return UriBuilder(registry, StaticBaseUrl(BASE_URL))


@pytest.fixture
def touch():
    """Return a helper that creates an empty file and its parents."""

    return _touch


@pytest.fixture
def fake_probe():
    """Return the :class:`FakeProbe` factory."""

    return FakeProbe
