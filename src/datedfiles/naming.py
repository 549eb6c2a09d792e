"""Convenience constructors for dated files of one template."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any, Callable, Iterator, Optional

from .dated_file import DatedFile
from .dateish import parse_dateish
from .directory import DirectoryView
from .filesystem import FileSystem
from .template import Template

Clock = Callable[[], datetime]

ONE_DAY = timedelta(days=1)


def daily_dates(start_date_ish: Any, today: date) -> Iterator[datetime]:
    """Yield ``start`` and each following day, stopping after ``today``'s calendar date.

    The time of day of the start value is kept on every yielded datetime.
    """

    current = parse_dateish(start_date_ish)
    while current.date() <= today:
        yield current
        current += ONE_DAY


class DateNamedFiles:
    """Build dated files for a template, optionally inside a directory.

    Attributes:
        template: Template naming the files.
        directory: Directory the dated files live in, if any.
    """

    def __init__(
        self,
        template: Template | str,
        directory: Path | str | None = None,
        *,
        clock: Clock = datetime.now,
    ) -> None:
        self.template = template if isinstance(template, Template) else Template(template)
        self.directory = Path(directory).expanduser() if directory is not None else None
        self._clock = clock

    def at(self, date_ish: Any) -> DatedFile:
        """Return the dated file for ``date_ish``."""
        return DatedFile.from_date(self.template, date_ish, directory=self.directory)

    on = at

    def now(self) -> DatedFile:
        return self.at(self._clock())

    today = now

    def tomorrow(self) -> DatedFile:
        return self.at(self._clock() + ONE_DAY)

    def yesterday(self) -> DatedFile:
        return self.at(self._clock() - ONE_DAY)

    def from_filename(self, filename: str) -> DatedFile:
        return DatedFile.from_filename(self.template, filename, directory=self.directory)

    def daily_since(self, start_date_ish: Any) -> Iterator[DatedFile]:
        """Return dated files for every day from the start date through today, inclusive.

        Raises:
            InvalidDateFormat: If ``start_date_ish`` is not a date, before any
                file is produced.
        """
        start = parse_dateish(start_date_ish)
        return self._daily(start, self._clock().date())

    def daily_through_yesterday(self, start_date_ish: Any) -> Iterator[DatedFile]:
        """Like :meth:`daily_since`, but stop before today."""
        start = parse_dateish(start_date_ish)
        return self._daily(start, self._clock().date() - ONE_DAY)

    def daily_after(self, start_date_ish: Any) -> Iterator[DatedFile]:
        """Like :meth:`daily_since`, but without the start date itself."""
        start = parse_dateish(start_date_ish) + ONE_DAY
        return self._daily(start, self._clock().date())

    def _daily(self, start: datetime, last_day: date) -> Iterator[DatedFile]:
        for moment in daily_dates(start, last_day):
            yield self.at(moment)

    def in_directory(
        self,
        directory: Path | str | None = None,
        *,
        filesystem: Optional[FileSystem] = None,
    ) -> DirectoryView:
        """Scan ``directory`` (or the bound directory) for files matching the template.

        Raises:
            ValueError: If no directory is given and none is bound.
        """
        target = directory if directory is not None else self.directory
        if target is None:
            raise ValueError("No directory given and none bound to these dated files")
        return DirectoryView.open(self.template, target, filesystem=filesystem)

    def __repr__(self) -> str:
        if self.directory is None:
            return f"{type(self).__name__}({self.template.template_string!r})"
        return f"{type(self).__name__}({self.template.template_string!r}, {str(self.directory)!r})"


def new(template_string: str, directory: Path | str | None = None) -> DateNamedFiles:
    """Return dated-file helpers for ``template_string``, bound to ``directory`` if given."""
    return DateNamedFiles(template_string, directory)


__all__ = ["Clock", "DateNamedFiles", "daily_dates", "new"]
