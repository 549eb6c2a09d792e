"""Immutable filename templates with embedded date/time fields."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any

from datedfiles.dateish import (
    from_unix_millis,
    from_unix_seconds,
    parse_compact_digits,
    parse_dateish,
    to_unix_millis,
    to_unix_seconds,
)
from datedfiles.errors import InvalidDateFormat, TemplateMismatch

from .compiler import build_pattern, tokenize, validate
from .models import FieldKind, FieldToken, LiteralToken, TemplateToken


class Template:
    """A filename pattern with date/time fields in a fixed temporal order.

    Examples:
        * ``daily_update_<%Y-%m-%d>.txt``
        * ``mydaemon_<%Y_%m_%d_%H%M>.log``
        * ``updates<%Y%m%d>_dev.ndj.gz``
        * ``export_%s.json`` (unix seconds, field-substitution grammar)

    Templates are values: they compare and hash by their template string and
    are never changed in place, so one instance can back any number of dated
    files and directory views.
    """

    __slots__ = ("_template_string", "_tokens", "_pattern")

    def __init__(self, template_string: str) -> None:
        """Compile ``template_string``.

        Args:
            template_string: Template with bracketed or bare strftime codes.

        Raises:
            InvalidTemplateFormat: If the template cannot be compiled.
        """
        tokens = tokenize(template_string)
        validate(template_string, tokens)
        self._template_string = template_string
        self._tokens = tokens
        self._pattern = build_pattern(tokens)

    @classmethod
    def compile(cls, template_string: str) -> "Template":
        return cls(template_string)

    @property
    def template_string(self) -> str:
        return self._template_string

    @property
    def tokens(self) -> tuple[TemplateToken, ...]:
        return self._tokens

    @property
    def pattern(self) -> re.Pattern[str]:
        """Return the whole-name regular expression; one group per field."""
        return self._pattern

    @property
    def fields(self) -> tuple[FieldToken, ...]:
        return tuple(token for token in self._tokens if isinstance(token, FieldToken))

    @property
    def is_literal(self) -> bool:
        """Return whether the template has no date fields at all."""
        return not self.fields

    @property
    def strftime_template(self) -> str:
        """Return the template with brackets removed, as a strftime-style string."""
        return "".join(
            token.text.replace("%", "%%") if isinstance(token, LiteralToken) else token.code
            for token in self._tokens
        )

    def with_template_string(self, template_string: str) -> "Template":
        """Return a new template compiled from ``template_string``."""
        return type(self)(template_string)

    def filename_for(self, date_ish: Any) -> str:
        """Return the name this template produces for ``date_ish``.

        Args:
            date_ish: Any value accepted by :func:`datedfiles.dateish.parse_dateish`.

        Returns:
            str: The expanded name with zero-padded fields.

        Raises:
            InvalidDateFormat: If ``date_ish`` is not a date, or falls before
                1970 for a template with a unix epoch field.
        """
        moment = parse_dateish(date_ish)
        return "".join(
            token.text if isinstance(token, LiteralToken) else _render_field(token, moment)
            for token in self._tokens
        )

    def matches(self, name: Any) -> bool:
        """Return whether all of ``name`` conforms to the template."""
        return self._pattern.fullmatch(str(name)) is not None

    def extract_date(self, name: Any) -> datetime:
        """Recover the datetime embedded in ``name``.

        Raises:
            TemplateMismatch: If ``name`` does not match the template.
            InvalidDateFormat: If the captured digits are not a valid date, or
                the template has no date fields to read.
        """
        text = str(name)
        match = self._pattern.fullmatch(text)
        if match is None:
            raise TemplateMismatch(self._template_string, text)

        fields = self.fields
        if not fields:
            raise InvalidDateFormat(
                f"Template '{self._template_string}' has no date fields to extract from '{text}'",
                value=text,
            )

        captures = match.groups()
        kind = fields[0].kind
        try:
            if kind is FieldKind.UNIX_SECONDS:
                return from_unix_seconds(int(captures[0]))
            if kind is FieldKind.UNIX_MILLIS:
                return from_unix_millis(int(captures[0]))
        except OverflowError as exc:
            raise InvalidDateFormat(
                f"Timestamp {captures[0]} in '{text}' is out of range", value=text
            ) from exc
        if kind is FieldKind.DIGITS:
            # Fixed-width runs are YYYYMMDD... by construction.
            if fields[0].width is not None:
                return parse_compact_digits(captures[0])
            return parse_dateish(captures[0])
        return parse_dateish("-".join(captures))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Template):
            return NotImplemented
        return self._template_string == other._template_string

    def __hash__(self) -> int:
        return hash(self._template_string)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._template_string!r})"

    def __str__(self) -> str:
        return self._template_string


def _render_field(token: FieldToken, moment: datetime) -> str:
    kind = token.kind
    if kind is FieldKind.YEAR:
        return f"{moment.year:04d}"
    if kind is FieldKind.MONTH:
        return f"{moment.month:02d}"
    if kind is FieldKind.DAY:
        return f"{moment.day:02d}"
    if kind is FieldKind.HOUR:
        return f"{moment.hour:02d}"
    if kind is FieldKind.MINUTE:
        return f"{moment.minute:02d}"
    if kind is FieldKind.SECOND:
        return f"{moment.second:02d}"
    if kind.is_epoch:
        value = to_unix_seconds(moment) if kind is FieldKind.UNIX_SECONDS else to_unix_millis(moment)
        if value < 0:
            raise InvalidDateFormat(
                f"{moment.isoformat()} is before the unix epoch and has no {token.code} field",
                value=moment,
            )
        return str(value)
    compact = (
        f"{moment.year:04d}{moment.month:02d}{moment.day:02d}"
        f"{moment.hour:02d}{moment.minute:02d}{moment.second:02d}"
    )
    return compact[: token.width] if token.width is not None else compact


__all__ = ["Template"]
