"""Token models for compiled filename templates."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class FieldKind(str, Enum):
    """Date/time fields a template may embed, keyed by their strftime code."""

    YEAR = "%Y"
    MONTH = "%m"
    DAY = "%d"
    HOUR = "%H"
    MINUTE = "%M"
    SECOND = "%S"
    UNIX_SECONDS = "%s"
    UNIX_MILLIS = "%Q"
    DIGITS = "%i"

    @property
    def is_calendar(self) -> bool:
        return self in CALENDAR_ORDER

    @property
    def is_epoch(self) -> bool:
        return self in (FieldKind.UNIX_SECONDS, FieldKind.UNIX_MILLIS)


CALENDAR_ORDER = (
    FieldKind.YEAR,
    FieldKind.MONTH,
    FieldKind.DAY,
    FieldKind.HOUR,
    FieldKind.MINUTE,
    FieldKind.SECOND,
)

# Widths accepted for a fixed-width generic integer field (YYYYMMDD up to YYYYMMDDHHMMSS).
DIGIT_FIELD_WIDTHS = (8, 10, 12, 14)


@dataclass(frozen=True, slots=True)
class LiteralToken:
    """Literal text copied verbatim into generated names.

    Attributes:
        text: The literal characters.
    """

    text: str

    @property
    def pattern(self) -> str:
        return re.escape(self.text)


@dataclass(frozen=True, slots=True)
class FieldToken:
    """A numeric date/time field.

    Attributes:
        kind: Which date/time component the field holds.
        width: Exact digit count, or ``None`` for a variable-width field.
    """

    kind: FieldKind
    width: Optional[int] = None

    @property
    def pattern(self) -> str:
        if self.width is None:
            return "([0-9]+)"
        return f"([0-9]{{{self.width}}})"

    @property
    def code(self) -> str:
        if self.kind is FieldKind.DIGITS and self.width is not None:
            return f"%{self.width}i"
        return self.kind.value


TemplateToken = Union[LiteralToken, FieldToken]


def field_token(kind: FieldKind, width: Optional[int] = None) -> FieldToken:
    """Return a field token with the fixed width implied by ``kind``."""

    if kind is FieldKind.YEAR:
        return FieldToken(kind, 4)
    if kind.is_calendar:
        return FieldToken(kind, 2)
    if kind is FieldKind.DIGITS:
        return FieldToken(kind, width)
    return FieldToken(kind)


__all__ = [
    "CALENDAR_ORDER",
    "DIGIT_FIELD_WIDTHS",
    "FieldKind",
    "FieldToken",
    "LiteralToken",
    "TemplateToken",
    "field_token",
]
