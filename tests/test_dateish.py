"""Tests for forgiving date-ish parsing."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from datedfiles.dateish import (
    DateishKind,
    classify_dateish,
    from_unix_millis,
    from_unix_seconds,
    looks_like_unix_timestamp,
    parse_dateish,
    to_unix_millis,
    to_unix_seconds,
)
from datedfiles.errors import InvalidDateFormat, NonDigitsInDelimitedDate, NonTwoDigitDateParts


class _HasToDatetime:
    def to_datetime(self) -> datetime:
        return datetime(2021, 3, 4, 5, 6, 7)


def test_digit_run_and_delimited_forms_agree() -> None:
    expected = datetime(2023, 6, 15, 0, 0, 0)

    assert parse_dateish("20230615") == expected
    assert parse_dateish("2023-06-15") == expected
    assert parse_dateish(20230615) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("2023061514", datetime(2023, 6, 15, 14)),
        ("202306151430", datetime(2023, 6, 15, 14, 30)),
        ("20230615143005", datetime(2023, 6, 15, 14, 30, 5)),
        ("20230615143005123", datetime(2023, 6, 15, 14, 30, 5)),
        ("20230615143", datetime(2023, 6, 15, 14)),
    ],
)
def test_digit_runs_are_read_in_two_digit_chunks(value: str, expected: datetime) -> None:
    assert parse_dateish(value) == expected


def test_ten_digits_starting_with_one_is_a_unix_timestamp() -> None:
    assert parse_dateish("1686837825") == datetime(2023, 6, 15, 14, 3, 45)
    assert parse_dateish(1686837825) == datetime(2023, 6, 15, 14, 3, 45)


def test_eleven_digits_are_not_a_unix_timestamp() -> None:
    assert not looks_like_unix_timestamp("16868378250")

    # 1686-83-78 is not a calendar date
    with pytest.raises(InvalidDateFormat):
        parse_dateish("16868378250")


def test_ten_digits_not_starting_with_one_are_calendar_digits() -> None:
    assert parse_dateish("2023061514") == datetime(2023, 6, 15, 14)
    assert not looks_like_unix_timestamp("2023061514")


def test_short_digit_runs_fail() -> None:
    with pytest.raises(InvalidDateFormat, match="doesn't parse"):
        parse_dateish("202306")


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("2023-06-15 14:30:05", datetime(2023, 6, 15, 14, 30, 5)),
        ("2023_06_15", datetime(2023, 6, 15)),
        ("2023:06:15:14", datetime(2023, 6, 15, 14)),
        ("2023-06-15__14--30", datetime(2023, 6, 15, 14, 30)),
        ("2023-06", datetime(2023, 6, 1)),
        ("2023-06-15-", datetime(2023, 6, 15)),
    ],
)
def test_delimited_strings(value: str, expected: datetime) -> None:
    assert parse_dateish(value) == expected


def test_unpadded_parts_are_rejected() -> None:
    with pytest.raises(NonTwoDigitDateParts):
        parse_dateish("2023-6-5")


def test_non_digit_parts_are_rejected() -> None:
    with pytest.raises(NonDigitsInDelimitedDate):
        parse_dateish("2023-06-1x")


def test_strings_must_start_with_a_year() -> None:
    with pytest.raises(InvalidDateFormat, match="doesn't obviously start with a year"):
        parse_dateish("abcd-06-15")


def test_invalid_calendar_values_report_the_input() -> None:
    with pytest.raises(InvalidDateFormat) as excinfo:
        parse_dateish("2023-13-01")

    assert excinfo.value.value == "2023-13-01"
    assert "2023-13-01" in str(excinfo.value)
    assert isinstance(excinfo.value.__cause__, InvalidDateFormat)


def test_too_many_parts_fail() -> None:
    with pytest.raises(InvalidDateFormat, match="Too many"):
        parse_dateish("2023-06-15-01-02-03-04")


def test_native_values_short_circuit() -> None:
    moment = datetime(2023, 6, 15, 1, 2, 3, 456000)

    assert parse_dateish(moment) is moment
    assert parse_dateish(date(2023, 6, 15)) == datetime(2023, 6, 15)
    assert parse_dateish(_HasToDatetime()) == datetime(2021, 3, 4, 5, 6, 7)


def test_aware_datetimes_are_normalised_to_utc() -> None:
    aware = datetime(2023, 6, 15, 12, 0, tzinfo=timezone(timedelta(hours=2)))

    assert parse_dateish(aware) == datetime(2023, 6, 15, 10, 0)


def test_classify_dateish() -> None:
    assert classify_dateish(date(2023, 1, 1))[0] is DateishKind.DATETIME
    assert classify_dateish(20230101) == (DateishKind.DIGITS, "20230101")
    assert classify_dateish("2023-01-01") == (DateishKind.DELIMITED, "2023-01-01")


def test_unix_helpers_are_inverse() -> None:
    moment = datetime(2023, 6, 15, 14, 3, 45, 123000)

    assert from_unix_millis(to_unix_millis(moment)) == moment
    assert from_unix_seconds(to_unix_seconds(moment)) == moment.replace(microsecond=0)
