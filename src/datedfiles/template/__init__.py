"""Filename templates: compilation, generation, and date extraction."""

from .compiler import build_pattern, tokenize, validate
from .engine import Template
from .models import CALENDAR_ORDER, FieldKind, FieldToken, LiteralToken, TemplateToken

__all__ = [
    "CALENDAR_ORDER",
    "FieldKind",
    "FieldToken",
    "LiteralToken",
    "Template",
    "TemplateToken",
    "build_pattern",
    "tokenize",
    "validate",
]
