"""Forgiving conversion of date-ish values into canonical datetimes.

A *date-ish* value is anything a user is likely to hand us when they mean a
point in time: a ``datetime``/``date``, an object exposing ``to_datetime()``,
an integer, a run of digits (``20230615``, ``20230615143000``), a unix
timestamp (``1686837825``), or a delimited string (``2023-06-15 14:30``).

The canonical representation is a naive ``datetime``. Timezone-aware values
are converted to UTC first, and unix epoch values are read as UTC.
"""

from __future__ import annotations

import enum
import re
from datetime import date, datetime, timedelta, timezone
from typing import Any, Sequence

from .errors import InvalidDateFormat, NonDigitsInDelimitedDate, NonTwoDigitDateParts

EPOCH = datetime(1970, 1, 1)

_ALL_DIGITS = re.compile(r"[0-9]+")
_LEADS_WITH_YEAR = re.compile(r"[0-9]{4}")
_UNDELIMITED = re.compile(r"([0-9]{4})([0-9]{2})([0-9]{2})([0-9]{2})?([0-9]{2})?([0-9]{2})?[0-9]*")
_UNIX_TIMESTAMP = re.compile(r"1[0-9]{9}")
_LEADING_DELIMITER = re.compile(r"\A[-_ :]")
_DELIMITER_RUN = re.compile(r"[-_ :]+")

# year, month, day, hour, minute, second
_MAX_PARTS = 6


class DateishKind(enum.Enum):
    """Shape of a date-ish input, deciding which parsing rule applies."""

    DATETIME = "datetime"
    DIGITS = "digits"
    DELIMITED = "delimited"


def classify_dateish(value: Any) -> tuple[DateishKind, Any]:
    """Return the input shape and the payload the matching rule consumes.

    Date values are returned as-is; everything else is rendered to ``str``.
    """

    if isinstance(value, (datetime, date)) or callable(getattr(value, "to_datetime", None)):
        return DateishKind.DATETIME, value
    text = str(value)
    if is_digit_string(text):
        return DateishKind.DIGITS, text
    return DateishKind.DELIMITED, text


def parse_dateish(value: Any) -> datetime:
    """Turn a date-ish value into a canonical naive datetime.

    Args:
        value: A date/datetime, an object with ``to_datetime()``, an integer,
            or a string of digits or delimited digits.

    Returns:
        datetime: The canonical datetime described by ``value``.

    Raises:
        InvalidDateFormat: If no rule can read ``value`` as a date. The
            subclasses ``NonDigitsInDelimitedDate`` and ``NonTwoDigitDateParts``
            identify malformed delimited strings.
    """

    kind, payload = classify_dateish(value)
    try:
        if kind is DateishKind.DATETIME:
            return _from_native(payload)
        if kind is DateishKind.DIGITS:
            return parse_digit_string(payload)
        return parse_delimited_string(payload)
    except InvalidDateFormat as exc:
        raise type(exc)(f"Can't turn '{value}' into a date-time: {exc}", value=value) from exc


def parse_digit_string(digits: str) -> datetime:
    """Parse an all-digit string as a unix timestamp or ``YYYYMMDD[HH[MM[SS]]]``.

    Exactly ten digits starting with ``1`` are unix seconds; this only
    recognises timestamps from September 2001 up to 2033. Anything else needs
    at least eight digits; digits past the seconds are dropped.
    """

    if looks_like_unix_timestamp(digits):
        return from_unix_seconds(int(digits))
    return parse_compact_digits(digits)


def parse_compact_digits(digits: str) -> datetime:
    """Parse ``YYYYMMDD[HH[MM[SS]]]`` with no unix-timestamp reading."""

    match = _UNDELIMITED.fullmatch(digits)
    if match is None:
        raise InvalidDateFormat(
            f"All-digit string '{digits}' doesn't parse as date string or unix timestamp",
            value=digits,
        )
    return datetime_from_parts([part for part in match.groups() if part is not None])


def parse_delimited_string(text: str) -> datetime:
    """Parse a year followed by two-digit parts separated by ``-``, ``_``, space or ``:``."""

    if not _LEADS_WITH_YEAR.match(text):
        raise InvalidDateFormat(f"'{text}' doesn't obviously start with a year", value=text)

    rest = _LEADING_DELIMITER.sub("", text[4:], count=1).rstrip("-_ :")
    parts = _DELIMITER_RUN.split(rest) if rest else []

    if not all(is_digit_string(part) for part in parts):
        raise NonDigitsInDelimitedDate(
            f"Trying to parse as delimited date. '{text}' looks to have non-digits between delimiters.",
            value=text,
        )
    if not all(len(part) == 2 for part in parts):
        raise NonTwoDigitDateParts(
            f"Trying to parse as delimited date. '{text}' looks to have non-two-digit parts "
            "(no zero padding?).",
            value=text,
        )
    return datetime_from_parts([text[:4], *parts])


def datetime_from_parts(parts: Sequence[str]) -> datetime:
    """Build a datetime from a year string followed by two-digit component strings.

    Missing month and day default to 1, matching a bare ``YYYY-MM`` reading
    as the first of the month.
    """

    if len(parts) > _MAX_PARTS:
        raise InvalidDateFormat(
            f"Too many date parts ([{','.join(parts)}]); expected at most {_MAX_PARTS}.",
            value=",".join(parts),
        )
    numbers = [int(part) for part in parts]
    while len(numbers) < 3:
        numbers.append(1)
    try:
        return datetime(*numbers)
    except ValueError as exc:
        raise InvalidDateFormat(
            f"datetime() rejected extracted parts ([{','.join(parts)}]): {exc}",
            value=",".join(parts),
        ) from exc


def looks_like_unix_timestamp(digits: str) -> bool:
    """Return whether ``digits`` is plausibly a modern unix timestamp (10 digits, leading 1)."""

    return _UNIX_TIMESTAMP.fullmatch(digits) is not None


def is_digit_string(text: str) -> bool:
    return _ALL_DIGITS.fullmatch(text) is not None


def from_unix_seconds(seconds: int) -> datetime:
    return EPOCH + timedelta(seconds=seconds)


def from_unix_millis(millis: int) -> datetime:
    return EPOCH + timedelta(milliseconds=millis)


def to_unix_seconds(moment: datetime) -> int:
    return (moment - EPOCH) // timedelta(seconds=1)


def to_unix_millis(moment: datetime) -> int:
    return (moment - EPOCH) // timedelta(milliseconds=1)


def _from_native(value: Any) -> datetime:
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    converted = value.to_datetime()
    if not isinstance(converted, (datetime, date)):
        raise InvalidDateFormat(
            f"{type(value).__name__}.to_datetime() returned {type(converted).__name__}, not a datetime",
            value=value,
        )
    return _from_native(converted)


__all__ = [
    "DateishKind",
    "EPOCH",
    "classify_dateish",
    "datetime_from_parts",
    "from_unix_millis",
    "from_unix_seconds",
    "is_digit_string",
    "looks_like_unix_timestamp",
    "parse_compact_digits",
    "parse_dateish",
    "parse_delimited_string",
    "parse_digit_string",
    "to_unix_millis",
    "to_unix_seconds",
]
