"""Filesystem access used by the resolver."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class FilesystemProbe(Protocol):
    """Answer existence questions about filesystem paths."""

    def exists(self, path: str) -> bool:
        ...

    def canonicalize(self, path: str) -> Optional[str]:
        ...

    def is_directory(self, path: str) -> bool:
        ...


class OSFilesystemProbe:
    """Probe backed by the local filesystem."""

    def exists(self, path: str) -> bool:
        if not path:
            return False
        try:
            return Path(path).exists()
        except OSError:
            return False

    def canonicalize(self, path: str) -> Optional[str]:
        """Return the real absolute path of *path*, or ``None`` if it is missing."""

        if not path:
            return None
        try:
            return str(Path(path).resolve(strict=True))
        except (OSError, RuntimeError):
            # Missing targets and symlink loops both mean "unresolvable".
            return None

    def is_directory(self, path: str) -> bool:
        if not path:
            return False
        try:
            return Path(path).is_dir()
        except OSError:
            return False


__all__ = ["FilesystemProbe", "OSFilesystemProbe"]
