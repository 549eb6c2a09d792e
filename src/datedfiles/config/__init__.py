"""Configuration management for datedfiles."""

from __future__ import annotations

import os
import textwrap
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError
from .models import CLIOptions, DatedFilesConfig, LoggingSettings
from .resolver import (
    ENV_PREFIX,
    assign_nested,
    flatten_for_env,
    parse_env_overrides,
    resolve_with_precedence,
)

DEFAULT_CONFIG_PATH = Path("~/.datedfiles/config.yaml")
_CONFIG_HEADER = textwrap.dedent(
    """\
    # datedfiles configuration file
    # Manage with `datedfiles config edit` or `datedfiles config set KEY --value VALUE`.
    # `templates` maps short names to template strings usable on the command line.
    """
)


class ConfigManager:
    """Read and write the YAML configuration file and resolve effective settings."""

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._config_path = (config_path or DEFAULT_CONFIG_PATH).expanduser()
        self._env = env if env is not None else os.environ

    @property
    def config_path(self) -> Path:
        return self._config_path

    def load(
        self,
        *,
        cli_overrides: Mapping[str, Any] | None = None,
        include_env: bool = True,
        ensure_file: bool = False,
        env_overrides: Mapping[str, str] | None = None,
    ) -> DatedFilesConfig:
        """Return the effective configuration.

        Args:
            cli_overrides: Dotted-key overrides taking highest precedence.
            include_env: Whether `DATEDFILES__*` environment variables apply.
            ensure_file: Write a default file first when none exists.
            env_overrides: Environment mapping to use instead of the process environment.

        Raises:
            ConfigError: If the file cannot be parsed or values fail validation.
        """
        if ensure_file:
            self.ensure_exists()

        env_data: dict[str, Any] | None = None
        if include_env:
            env_data = parse_env_overrides(env_overrides if env_overrides is not None else self._env)

        return resolve_with_precedence(
            defaults=DatedFilesConfig(),
            file_overrides=self._read_file(),
            env_overrides=env_data or None,
            cli_overrides=cli_overrides,
        )

    def load_file_overrides(self) -> dict[str, Any]:
        """Return the raw mapping stored on disk."""
        return self._read_file()

    def save(self, config: DatedFilesConfig | Mapping[str, Any]) -> None:
        if isinstance(config, DatedFilesConfig):
            data = config.model_dump(mode="python")
        else:
            data = dict(config)
        self._write_file(data)

    def ensure_exists(self) -> Path:
        """Create a configuration file holding the defaults if none exists."""
        if not self._config_path.exists():
            self._write_file(DatedFilesConfig().model_dump(mode="python"))
        return self._config_path

    def read_text(self) -> str:
        if not self._config_path.exists():
            return ""
        return self._config_path.read_text(encoding="utf-8")

    # Internal helpers -------------------------------------------------

    def _read_file(self) -> dict[str, Any]:
        if not self._config_path.exists():
            return {}

        try:
            raw = yaml.safe_load(self._config_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse configuration file: {exc}") from exc

        if not isinstance(raw, dict):
            raise ConfigError("Configuration file must contain a mapping at the top level.")
        return raw

    def _write_file(self, data: Mapping[str, Any]) -> None:
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        body = yaml.safe_dump(dict(data), sort_keys=False)
        self._config_path.write_text(
            f"{_CONFIG_HEADER}# Last updated: {stamp}\n{body}", encoding="utf-8"
        )


__all__ = [
    "CLIOptions",
    "ConfigError",
    "ConfigManager",
    "DEFAULT_CONFIG_PATH",
    "DatedFilesConfig",
    "ENV_PREFIX",
    "LoggingSettings",
    "assign_nested",
    "flatten_for_env",
    "parse_env_overrides",
    "resolve_with_precedence",
]
