"""Name, recognise, and enumerate files with dates embedded in their names."""

from importlib import metadata as _metadata

from .dated_file import DatedFile
from .dateish import parse_dateish
from .directory import DirectoryView
from .errors import (
    DatedFilesError,
    DirectoryNotFound,
    InvalidDateFormat,
    InvalidTemplateFormat,
    NonDigitsInDelimitedDate,
    NonTwoDigitDateParts,
    NotADirectory,
    TemplateMismatch,
)
from .naming import DateNamedFiles, new
from .template import Template

__all__ = [
    "__version__",
    "DateNamedFiles",
    "DatedFile",
    "DatedFilesError",
    "DirectoryNotFound",
    "DirectoryView",
    "InvalidDateFormat",
    "InvalidTemplateFormat",
    "NonDigitsInDelimitedDate",
    "NonTwoDigitDateParts",
    "NotADirectory",
    "Template",
    "TemplateMismatch",
    "new",
    "parse_dateish",
]


def __getattr__(name: str):
    if name == "__version__":
        return _metadata.version("datedfiles")
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__():
    return sorted(list(globals().keys()) + ["__version__"])
