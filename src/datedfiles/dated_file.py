"""Dated files: a template, a datetime, and the path the template yields for it."""

from __future__ import annotations

import functools
from datetime import date, datetime
from pathlib import Path, PurePath
from typing import Any, Optional

from .dateish import parse_dateish
from .errors import InvalidDateFormat, TemplateMismatch
from .template import Template


@functools.total_ordering
class DatedFile:
    """The file a template names for a particular datetime.

    Dated files only compute paths; they never touch the filesystem. They
    order by datetime, both among themselves and against raw date-ish values
    or names matching the same template.
    """

    __slots__ = ("_template", "_datetime", "_filename", "_directory")

    def __init__(
        self,
        template: Template,
        date_ish: Any,
        *,
        directory: Path | str | None = None,
    ) -> None:
        moment = parse_dateish(date_ish)
        self._assign(template, moment, template.filename_for(moment), directory)

    def _assign(
        self,
        template: Template,
        moment: datetime,
        filename: str,
        directory: Path | str | None,
    ) -> None:
        self._template = template
        self._datetime = moment
        self._filename = filename
        self._directory = Path(directory) if directory is not None else None

    @classmethod
    def from_date(
        cls,
        template: Template,
        date_ish: Any,
        *,
        directory: Path | str | None = None,
    ) -> "DatedFile":
        """Return the dated file ``template`` names for ``date_ish``."""
        return cls(template, date_ish, directory=directory)

    @classmethod
    def from_filename(
        cls,
        template: Template,
        filename: str | PurePath,
        *,
        directory: Path | str | None = None,
    ) -> "DatedFile":
        """Build a dated file from an existing name.

        The datetime is read from ``filename`` and the name is kept as given,
        so the path still points at the existing file even when the template
        would render that datetime differently (variable-width fields).

        Raises:
            TemplateMismatch: If ``filename`` does not match ``template``.
            InvalidDateFormat: If the embedded digits are not a valid date.
        """
        name = str(filename)
        if not template.matches(name):
            raise TemplateMismatch(template.template_string, name)
        dated = cls.__new__(cls)
        dated._assign(template, template.extract_date(name), name, directory)
        return dated

    @property
    def template(self) -> Template:
        return self._template

    @property
    def datetime(self) -> datetime:
        return self._datetime

    @property
    def date(self) -> date:
        return self._datetime.date()

    @property
    def filename(self) -> str:
        return self._filename

    @property
    def directory(self) -> Optional[Path]:
        return self._directory

    @property
    def path(self) -> Path:
        """Return the full path: the directory, when bound, joined with the filename."""
        if self._directory is None:
            return Path(self._filename)
        return self._directory / self._filename

    def to_datetime(self) -> datetime:
        return self._datetime

    def with_datetime(self, date_ish: Any) -> "DatedFile":
        """Return a dated file for ``date_ish`` sharing this template and directory."""
        return type(self)(self._template, date_ish, directory=self._directory)

    def matches(self, other: Any) -> bool:
        """Return whether ``other`` (or its basename) matches the bound template."""
        return self._matching_name(other) is not None

    def datetime_of(self, other: Any) -> datetime:
        """Return the datetime ``other`` stands for under this file's template.

        Names matching the template are read through it; anything else goes
        through :func:`datedfiles.dateish.parse_dateish`.
        """
        if isinstance(other, DatedFile):
            return other.datetime
        name = self._matching_name(other)
        if name is not None:
            return self._template.extract_date(name)
        return parse_dateish(other)

    def _matching_name(self, other: Any) -> Optional[str]:
        if isinstance(other, (datetime, date, DatedFile)):
            return None
        text = str(other)
        if self._template.matches(text):
            return text
        basename = PurePath(text).name
        if basename != text and self._template.matches(basename):
            return basename
        return None

    def __eq__(self, other: object) -> bool:
        try:
            return self._datetime == self.datetime_of(other)
        except InvalidDateFormat:
            return NotImplemented

    def __lt__(self, other: Any) -> bool:
        return self._datetime < self.datetime_of(other)

    def __hash__(self) -> int:
        return hash(self._datetime)

    def __repr__(self) -> str:
        return f"<{type(self).__name__}:{self.path}>"

    def __str__(self) -> str:
        return str(self.path)


__all__ = ["DatedFile"]
