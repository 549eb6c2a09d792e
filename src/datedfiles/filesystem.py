"""Filesystem access used by directory views."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from .errors import DirectoryNotFound, NotADirectory


class FileSystem(Protocol):
    """The listing and existence primitives a directory view needs."""

    def list_children(self, directory: Path) -> list[str]:
        """Return the names of the direct children of ``directory``."""
        ...

    def exists(self, path: Path) -> bool:
        """Return whether ``path`` exists."""
        ...

    def resolve_directory(self, path: Path | str) -> Path:
        """Return the canonical path of an existing directory."""
        ...


class LocalFileSystem:
    """:class:`FileSystem` backed by :mod:`pathlib`."""

    def list_children(self, directory: Path) -> list[str]:
        return [child.name for child in directory.iterdir()]

    def exists(self, path: Path) -> bool:
        return path.exists()

    def resolve_directory(self, path: Path | str) -> Path:
        """Expand ``~`` and resolve symlinks for an existing directory.

        Raises:
            DirectoryNotFound: If nothing exists at ``path``.
            NotADirectory: If ``path`` exists but is not a directory.
        """
        resolved = Path(path).expanduser().resolve()
        if not resolved.exists():
            raise DirectoryNotFound(f"Directory '{path}' does not exist", path=path)
        if not resolved.is_dir():
            raise NotADirectory(f"'{path}' isn't a directory", path=path)
        return resolved


__all__ = ["FileSystem", "LocalFileSystem"]
