"""A template instantiated over a real directory."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterator, Optional

from .dated_file import DatedFile
from .errors import InvalidDateFormat
from .filesystem import FileSystem, LocalFileSystem
from .template import Template

LOGGER = logging.getLogger(__name__)


class DirectoryView:
    """Files in one directory whose names match a template, oldest first.

    The directory is listed once, when the view is built; iteration and the
    range queries work on that snapshot. :meth:`has_file_for_date` is the
    exception: it checks the filesystem at call time.
    """

    def __init__(
        self,
        template: Template,
        path: Path | str,
        *,
        filesystem: FileSystem | None = None,
    ) -> None:
        """Resolve ``path`` and snapshot the files matching ``template``.

        Args:
            template: Template that names the files of interest.
            path: Directory to scan.
            filesystem: Filesystem access; defaults to :class:`LocalFileSystem`.

        Raises:
            DirectoryNotFound: If ``path`` does not exist.
            NotADirectory: If ``path`` is not a directory.
        """
        self._filesystem = filesystem if filesystem is not None else LocalFileSystem()
        self._template = template
        self._path = self._filesystem.resolve_directory(path)
        self._skipped: dict[str, str] = {}
        self._files = self._scan()

    @classmethod
    def open(
        cls,
        template: Template,
        path: Path | str,
        *,
        filesystem: FileSystem | None = None,
    ) -> "DirectoryView":
        return cls(template, path, filesystem=filesystem)

    @property
    def template(self) -> Template:
        return self._template

    @property
    def path(self) -> Path:
        return self._path

    @property
    def files(self) -> tuple[DatedFile, ...]:
        return self._files

    @property
    def skipped(self) -> dict[str, str]:
        """Return names that matched the template but held no valid date, with the reason."""
        return dict(self._skipped)

    def at(self, date_ish: Any) -> DatedFile:
        """Return the dated file this directory would hold for ``date_ish``."""
        return DatedFile.from_date(self._template, date_ish, directory=self._path)

    def first(self) -> Optional[DatedFile]:
        return self._files[0] if self._files else None

    def last(self) -> Optional[DatedFile]:
        return self._files[-1] if self._files else None

    def since(self, date_ish: Any) -> list[DatedFile]:
        """Return files dated on or after ``date_ish``."""
        return [dated for dated in self._files if dated >= date_ish]

    def after(self, date_ish: Any) -> list[DatedFile]:
        """Return files dated strictly after ``date_ish``."""
        return [dated for dated in self._files if dated > date_ish]

    def before(self, date_ish: Any) -> list[DatedFile]:
        """Return files dated strictly before ``date_ish``."""
        return [dated for dated in self._files if dated < date_ish]

    def on_or_before(self, date_ish: Any) -> list[DatedFile]:
        """Return files dated on or before ``date_ish``."""
        return [dated for dated in self._files if dated <= date_ish]

    def has_file_for_date(self, date_ish: Any) -> bool:
        """Return whether the file for ``date_ish`` exists right now.

        This asks the filesystem directly instead of consulting the snapshot,
        so files written after the view was built are seen.
        """
        return self._filesystem.exists(self.at(date_ish).path)

    has = has_file_for_date

    def __iter__(self) -> Iterator[DatedFile]:
        return iter(self._files)

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, date_ish: object) -> bool:
        return any(dated == date_ish for dated in self._files)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._template.template_string!r}, {str(self._path)!r})"

    def _scan(self) -> tuple[DatedFile, ...]:
        found: list[DatedFile] = []
        for name in self._filesystem.list_children(self._path):
            if not self._template.matches(name):
                continue
            try:
                dated = DatedFile.from_filename(self._template, name, directory=self._path)
            except InvalidDateFormat as exc:
                LOGGER.warning("Skipping %s in %s: %s", name, self._path, exc)
                self._skipped[name] = str(exc)
                continue
            found.append(dated)
        found.sort(key=lambda dated: (dated.datetime, dated.filename))
        LOGGER.debug(
            "Found %d file(s) matching %r in %s", len(found), self._template.template_string, self._path
        )
        return tuple(found)


__all__ = ["DirectoryView"]
