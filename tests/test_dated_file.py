"""Tests for dated file construction and ordering."""

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path

import pytest

from datedfiles.dated_file import DatedFile
from datedfiles.dateish import parse_dateish
from datedfiles.errors import InvalidDateFormat, TemplateMismatch
from datedfiles.template import Template

TEMPLATE = Template("prefix_<%Y%m%d>.log")


def _dated(value: str) -> DatedFile:
    return DatedFile.from_date(TEMPLATE, value)


def test_from_date_computes_name_and_path(tmp_path: Path) -> None:
    dated = DatedFile.from_date(TEMPLATE, "2023-01-15", directory=tmp_path)

    assert dated.filename == "prefix_20230115.log"
    assert dated.path == tmp_path / "prefix_20230115.log"
    assert dated.directory == tmp_path
    assert dated.datetime == datetime(2023, 1, 15)
    assert dated.date == date(2023, 1, 15)
    assert dated.template is TEMPLATE


def test_path_without_directory_is_relative() -> None:
    assert _dated("20230115").path == Path("prefix_20230115.log")


def test_from_filename_reads_the_date() -> None:
    dated = DatedFile.from_filename(TEMPLATE, "prefix_20230201.log")

    assert dated.datetime == datetime(2023, 2, 1)
    assert dated.filename == "prefix_20230201.log"


def test_from_filename_rejects_mismatches() -> None:
    with pytest.raises(TemplateMismatch):
        DatedFile.from_filename(TEMPLATE, "other.txt")


def test_from_filename_keeps_the_given_name() -> None:
    template = Template("log_%i.txt")

    dated = DatedFile.from_filename(template, "log_2023061514.txt")

    assert dated.filename == "log_2023061514.txt"
    assert dated.datetime == datetime(2023, 6, 15, 14)
    assert template.filename_for(dated.datetime) == "log_20230615140000.txt"


def test_ordering_between_dated_files() -> None:
    early, middle, late = _dated("20230101"), _dated("20230115"), _dated("20230201")

    assert early < middle < late
    assert early < late
    assert late > early
    assert sorted([late, early, middle]) == [early, middle, late]
    assert early == _dated("2023-01-01")


def test_ordering_against_raw_dateish_values() -> None:
    dated = _dated("20230115")

    assert dated == "20230115"
    assert dated == datetime(2023, 1, 15)
    assert dated == date(2023, 1, 15)
    assert dated > "2023-01-14"
    assert dated < 20230116
    assert dated >= "20230115"
    assert dated <= "20230115"


def test_ordering_against_names_matching_the_template() -> None:
    dated = _dated("20230115")

    assert dated == "prefix_20230115.log"
    assert dated < "prefix_20230116.log"
    assert dated == "/var/log/prefix_20230115.log"


def test_differently_formatted_names_for_the_same_instant_are_equal() -> None:
    template = Template("log_%i.txt")
    dated = DatedFile.from_filename(template, "log_20230615.txt")

    assert dated == "log_20230615000000.txt"
    assert dated != "log_20230616.txt"


def test_unreadable_values_are_unequal_but_unorderable() -> None:
    dated = _dated("20230115")

    assert dated != "garbage"
    assert not dated == None  # noqa: E711
    with pytest.raises(InvalidDateFormat):
        _ = dated < "garbage"


def test_with_datetime_returns_a_new_value(tmp_path: Path) -> None:
    dated = DatedFile.from_date(TEMPLATE, "20230115", directory=tmp_path)

    moved = dated.with_datetime("20230116")

    assert moved.filename == "prefix_20230116.log"
    assert moved.directory == tmp_path
    assert dated.filename == "prefix_20230115.log"


def test_dated_files_are_dateish() -> None:
    dated = _dated("20230115")

    assert parse_dateish(dated) == datetime(2023, 1, 15)
    assert DatedFile.from_date(Template("other_<%Y-%m-%d>"), dated).filename == "other_2023-01-15"


def test_hash_follows_equality() -> None:
    assert hash(_dated("20230115")) == hash(_dated("2023-01-15"))
    assert len({_dated("20230115"), _dated("2023-01-15"), _dated("20230116")}) == 2
