"""Compile template strings into tokens and a matching regular expression.

Two grammars are understood:

* Bracketed fields (the canonical form): ``daily_<%Y-%m-%d>.txt``. Only the
  text between ``<`` and ``>`` is read as strftime codes; the brackets are
  dropped and everything outside them is literal. Unknown codes inside
  brackets are an error.
* Field substitution: ``daily_%Y-%m-%d.txt``. Used when the template has no
  brackets at all; recognised codes anywhere are fields and any other text,
  unknown ``%`` codes included, is literal.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Sequence

from datedfiles.errors import InvalidTemplateFormat

from .models import (
    CALENDAR_ORDER,
    DIGIT_FIELD_WIDTHS,
    FieldKind,
    FieldToken,
    LiteralToken,
    TemplateToken,
    field_token,
)

LOGGER = logging.getLogger(__name__)

_BRACKETED_GROUP = re.compile(r"<([^<>]*)>")
_FIELD_CODE = re.compile(r"%(?:(?P<width>[0-9]+)i|(?P<code>[YmdHMSsQi%]))")
_CODES = {kind.value[1]: kind for kind in FieldKind}


def tokenize(template_string: str) -> tuple[TemplateToken, ...]:
    """Split ``template_string`` into literal and field tokens.

    Raises:
        InvalidTemplateFormat: If brackets are unbalanced or empty, or a
            bracketed group holds an unknown code.
    """

    if "<" in template_string or ">" in template_string:
        tokens = _tokenize_bracketed(template_string)
    else:
        tokens = list(_scan_codes(template_string, strict=False))
    return tuple(_merge_literals(tokens))


def validate(template_string: str, tokens: Sequence[TemplateToken]) -> None:
    """Reject field combinations that cannot be turned back into a date.

    Calendar fields must be a contiguous prefix of year, month, day, hour,
    minute, second starting with at least year, month and day. Epoch and
    generic integer fields must be the only field in the template.
    """

    fields = [token for token in tokens if isinstance(token, FieldToken)]
    if not fields:
        return

    kinds = [token.kind for token in fields]
    if len(set(kinds)) != len(kinds):
        raise InvalidTemplateFormat(f"Template '{template_string}' repeats a date field")

    standalone = [kind for kind in kinds if not kind.is_calendar]
    if standalone:
        if len(kinds) > 1:
            raise InvalidTemplateFormat(
                f"Template '{template_string}' mixes {standalone[0].value} with other date fields"
            )
        return

    expected = list(CALENDAR_ORDER[: len(kinds)])
    if kinds != expected:
        order = "".join(kind.value for kind in CALENDAR_ORDER)
        raise InvalidTemplateFormat(
            f"Template '{template_string}' fields must follow {order} in order without gaps"
        )
    if len(kinds) < 3:
        raise InvalidTemplateFormat(
            f"Template '{template_string}' needs at least year, month and day fields"
        )


def build_pattern(tokens: Iterable[TemplateToken]) -> re.Pattern[str]:
    """Return a regular expression capturing each field's digits in template order."""

    return re.compile("".join(token.pattern for token in tokens))


def _tokenize_bracketed(template_string: str) -> list[TemplateToken]:
    tokens: list[TemplateToken] = []
    position = 0
    for group in _BRACKETED_GROUP.finditer(template_string):
        tokens.append(LiteralToken(template_string[position : group.start()]))
        inner = group.group(1)
        if not inner:
            raise InvalidTemplateFormat(f"Template '{template_string}' has an empty <> group")
        tokens.extend(_scan_codes(inner, strict=True, template_string=template_string))
        position = group.end()
    tokens.append(LiteralToken(template_string[position:]))

    leftover = _BRACKETED_GROUP.sub("", template_string)
    if "<" in leftover or ">" in leftover:
        raise InvalidTemplateFormat(f"Template '{template_string}' has unbalanced angle brackets")
    return tokens


def _scan_codes(
    text: str, *, strict: bool, template_string: str | None = None
) -> Iterable[TemplateToken]:
    position = 0
    while position < len(text):
        percent = text.find("%", position)
        if percent == -1:
            yield LiteralToken(text[position:])
            return
        yield LiteralToken(text[position:percent])

        match = _FIELD_CODE.match(text, percent)
        if match is None:
            if strict:
                code = text[percent : percent + 2]
                raise InvalidTemplateFormat(
                    f"Template '{template_string or text}' uses unsupported field '{code}'"
                )
            LOGGER.debug("Treating unrecognised code at offset %d of %r as literal", percent, text)
            yield LiteralToken("%")
            position = percent + 1
            continue

        position = match.end()
        if match.group("width") is not None:
            width = int(match.group("width"))
            if width not in DIGIT_FIELD_WIDTHS:
                allowed = ", ".join(str(value) for value in DIGIT_FIELD_WIDTHS)
                raise InvalidTemplateFormat(
                    f"Template '{template_string or text}' integer field width {width} "
                    f"is not one of {allowed}"
                )
            yield field_token(FieldKind.DIGITS, width)
            continue

        code = match.group("code")
        if code == "%":
            yield LiteralToken("%")
        else:
            yield field_token(_CODES[code])


def _merge_literals(tokens: Iterable[TemplateToken]) -> list[TemplateToken]:
    merged: list[TemplateToken] = []
    for token in tokens:
        if isinstance(token, LiteralToken):
            if not token.text:
                continue
            if merged and isinstance(merged[-1], LiteralToken):
                merged[-1] = LiteralToken(merged[-1].text + token.text)
                continue
        merged.append(token)
    return merged


__all__ = ["tokenize", "validate", "build_pattern"]
