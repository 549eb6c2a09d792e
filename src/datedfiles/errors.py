"""Exceptions raised by datedfiles."""

from __future__ import annotations

from pathlib import Path
from typing import Any


class DatedFilesError(Exception):
    """Base exception for template, date, and directory operations."""


class InvalidTemplateFormat(DatedFilesError):
    """Raised when a template string cannot be compiled."""


class InvalidDateFormat(DatedFilesError):
    """Raised when a date-ish value cannot be turned into a datetime.

    Attributes:
        value: The offending input, when known.
    """

    def __init__(self, message: str, *, value: Any | None = None) -> None:
        super().__init__(message)
        self.value = value


class NonDigitsInDelimitedDate(InvalidDateFormat):
    """Raised when a delimited date has non-digit characters between delimiters."""


class NonTwoDigitDateParts(InvalidDateFormat):
    """Raised when a delimited date has parts that are not exactly two digits."""


class TemplateMismatch(DatedFilesError):
    """Raised when a name does not match the template it was checked against."""

    def __init__(self, template_string: str, name: str) -> None:
        super().__init__(f"'{name}' does not match template '{template_string}'")
        self.template_string = template_string
        self.name = name


class DirectoryError(DatedFilesError):
    """Base exception for directories that cannot back a directory view."""

    def __init__(self, message: str, *, path: Path | str) -> None:
        super().__init__(message)
        self.path = path


class DirectoryNotFound(DirectoryError):
    """Raised when a directory does not exist."""


class NotADirectory(DirectoryError):
    """Raised when a path exists but is not a directory."""


__all__ = [
    "DatedFilesError",
    "InvalidTemplateFormat",
    "InvalidDateFormat",
    "NonDigitsInDelimitedDate",
    "NonTwoDigitDateParts",
    "TemplateMismatch",
    "DirectoryError",
    "DirectoryNotFound",
    "NotADirectory",
]
