"""Merge configuration sources in precedence order."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from copy import deepcopy
from typing import Any, Dict, Mapping

import yaml
from pydantic import ValidationError

from .exceptions import ConfigError
from .models import DatedFilesConfig

ENV_PREFIX = "DATEDFILES__"

# Sections whose keys are user-chosen names rather than settings; their case is kept.
_NAMED_KEY_SECTIONS = frozenset({"templates"})


def resolve_with_precedence(
    *,
    defaults: DatedFilesConfig,
    file_overrides: Mapping[str, Any] | None = None,
    env_overrides: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> DatedFilesConfig:
    """Layer file, environment, and CLI overrides over the defaults, later sources winning.

    Raises:
        ConfigError: If an override is malformed or the merged values fail validation.
    """
    merged = defaults.model_dump(mode="python")
    layers = (("file", file_overrides), ("environment", env_overrides), ("cli", cli_overrides))
    for source_name, source in layers:
        if source is not None:
            merged = _deep_merge(merged, _expand_dotted(source, source_name=source_name))

    try:
        return DatedFilesConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration values: {exc}") from exc


def flatten_for_env(config: DatedFilesConfig) -> Dict[str, str]:
    """Render the config as `DATEDFILES__SECTION__KEY` environment variable values."""
    flat: Dict[str, str] = {}

    def _walk(path: list[str], value: Any) -> None:
        if isinstance(value, dict) and value:
            for key, child in value.items():
                _walk([*path, str(key)], child)
            return
        if isinstance(value, (dict, list)):
            rendered = yaml.safe_dump(value, default_flow_style=True).strip()
        else:
            rendered = "null" if value is None else str(value)
        flat[ENV_PREFIX + "__".join(_env_name(path))] = rendered

    for key, value in config.model_dump(mode="python").items():
        _walk([key], value)
    return flat


def parse_env_overrides(env: Mapping[str, str]) -> dict[str, Any]:
    """Collect `DATEDFILES__` variables into a nested override mapping.

    Values are parsed as YAML scalars so booleans and numbers keep their types.
    Section and setting names are case-insensitive; template alias names keep
    their case (`DATEDFILES__TEMPLATES__MyAlias`).
    """
    overrides: dict[str, Any] = {}
    for key, raw_value in env.items():
        if not key.startswith(ENV_PREFIX):
            continue
        path = _env_path(key[len(ENV_PREFIX) :])
        if not path:
            continue
        try:
            value = yaml.safe_load(raw_value)
        except yaml.YAMLError:
            value = raw_value
        assign_nested(overrides, path, value)
    return overrides


def assign_nested(target: dict[str, Any], path: list[str], value: Any) -> None:
    """Set ``value`` at ``path`` inside ``target``, creating intermediate mappings.

    Raises:
        ConfigError: If an intermediate key already holds a non-mapping value.
    """
    node = target
    for segment in path[:-1]:
        child = node.setdefault(segment, {})
        if not isinstance(child, dict):
            raise ConfigError(f"Cannot set {'.'.join(path)}: '{segment}' is not a section.")
        node = child
    node[path[-1]] = value


def _env_path(suffix: str) -> list[str]:
    """Split an environment key suffix, lowercasing all but user-chosen names."""
    segments = [segment for segment in suffix.split("__") if segment]
    if not segments:
        return []
    section = segments[0].lower()
    if section in _NAMED_KEY_SECTIONS:
        return [section, *segments[1:]]
    return [segment.lower() for segment in segments]


def _env_name(path: list[str]) -> list[str]:
    if path and path[0] in _NAMED_KEY_SECTIONS:
        return [path[0].upper(), *path[1:]]
    return [segment.upper() for segment in path]


def _expand_dotted(source: Mapping[str, Any], *, source_name: str) -> dict[str, Any]:
    if not isinstance(source, MappingABC):
        raise ConfigError(f"{source_name.capitalize()} overrides must be a mapping.")

    expanded: dict[str, Any] = {}
    for key, value in source.items():
        if not isinstance(key, str):
            raise ConfigError(f"{source_name.capitalize()} override keys must be strings.")
        if isinstance(value, MappingABC):
            value = _expand_dotted(value, source_name=source_name)
        path = key.split(".")
        existing = expanded
        for segment in path[:-1]:
            existing = existing.setdefault(segment, {})
            if not isinstance(existing, dict):
                raise ConfigError(
                    f"{source_name.capitalize()} override for {key} conflicts with existing value."
                )
        leaf = path[-1]
        if isinstance(value, dict) and isinstance(existing.get(leaf), dict):
            existing[leaf] = _deep_merge(existing[leaf], value)
        else:
            existing[leaf] = value
    return expanded


def _deep_merge(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    merged = {key: deepcopy(value) for key, value in base.items()}
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(value, MappingABC) and isinstance(current, MappingABC):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = deepcopy(value)
    return merged


__all__ = [
    "ENV_PREFIX",
    "assign_nested",
    "flatten_for_env",
    "parse_env_overrides",
    "resolve_with_precedence",
]
