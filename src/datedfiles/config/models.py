"""Configuration models describing datedfiles settings."""

from __future__ import annotations

from typing import Dict, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from datedfiles.errors import InvalidTemplateFormat
from datedfiles.template import Template


class DatedFilesBaseModel(BaseModel):
    """Shared configuration for datedfiles Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class LoggingSettings(DatedFilesBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level for the command line tool.
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value


class CLIOptions(DatedFilesBaseModel):
    """CLI behavior defaults and presentation preferences.

    Attributes:
        quiet_default: Whether commands suppress non-error output by default.
        json_default: Whether commands emit JSON unless told otherwise.
        datetime_format: strftime format used when displaying dates.
    """

    quiet_default: bool = False
    json_default: bool = False
    datetime_format: str = "%Y-%m-%d %H:%M:%S"


class DatedFilesConfig(DatedFilesBaseModel):
    """Top-level configuration for datedfiles.

    Attributes:
        templates: Named templates that may be used in place of a template string.
        logging: Logging configuration.
        cli: CLI presentation defaults.
    """

    templates: Dict[str, str] = Field(default_factory=dict)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)

    @field_validator("templates")
    @classmethod
    def _templates_compile(cls, value: Dict[str, str]) -> Dict[str, str]:
        for name, template_string in value.items():
            try:
                Template(template_string)
            except InvalidTemplateFormat as exc:
                raise ValueError(f"template '{name}': {exc}") from exc
        return value

    def resolve_template(self, name_or_template: str) -> Template:
        """Return the configured template called ``name_or_template``, or compile it as given."""
        return Template(self.templates.get(name_or_template, name_or_template))


__all__ = [
    "DatedFilesBaseModel",
    "LoggingSettings",
    "CLIOptions",
    "DatedFilesConfig",
]
