"""CLI tests for datedfiles commands."""

from __future__ import annotations

import json
from datetime import date, timedelta
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner, Result

from datedfiles.cli import cli

TEMPLATE = "prefix_<%Y%m%d>.log"


def _invoke(tmp_path: Path, *args: str, env: dict[str, str] | None = None) -> Result:
    runner = CliRunner()
    config_path = tmp_path / "config" / "config.yaml"
    return runner.invoke(cli, ["--config", str(config_path), *args], env=env)


def _populate(root: Path, *names: str) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    for name in names:
        (root / name).write_text("", encoding="utf-8")
    return root


def test_cli_help_displays_commands(tmp_path: Path) -> None:
    result = _invoke(tmp_path, "--help")

    assert result.exit_code == 0
    assert "names, matches, and lists files" in result.output
    for command in ("name", "match", "parse", "list", "has", "daily", "config"):
        assert command in result.output


def test_name_prints_the_generated_filename(tmp_path: Path) -> None:
    result = _invoke(tmp_path, "name", TEMPLATE, "2023-06-15")

    assert result.exit_code == 0
    assert result.output.strip() == "prefix_20230615.log"


def test_name_json_payload(tmp_path: Path) -> None:
    result = _invoke(tmp_path, "name", TEMPLATE, "20230615", "--json")

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["name"] == "prefix_20230615.log"
    assert payload["datetime"] == "2023-06-15T00:00:00"


def test_name_rejects_invalid_templates(tmp_path: Path) -> None:
    result = _invoke(tmp_path, "name", "<%m%Y%d>", "20230615", "--json")

    assert result.exit_code == 1
    assert json.loads(result.output)["error"]["code"] == "invalid_template"


def test_match_prints_the_embedded_date(tmp_path: Path) -> None:
    result = _invoke(tmp_path, "match", TEMPLATE, "prefix_20230615.log")

    assert result.exit_code == 0
    assert result.output.strip() == "2023-06-15 00:00:00"


def test_match_exits_non_zero_on_mismatch(tmp_path: Path) -> None:
    result = _invoke(tmp_path, "match", TEMPLATE, "other.txt", "--json")

    assert result.exit_code == 1
    assert json.loads(result.output) == {"match": False, "datetime": None}


def test_parse_command(tmp_path: Path) -> None:
    ok = _invoke(tmp_path, "parse", "1686837825")
    bad = _invoke(tmp_path, "parse", "2023-6-5")

    assert ok.exit_code == 0
    assert ok.output.strip() == "2023-06-15 14:03:45"
    assert bad.exit_code == 1
    assert "non-two-digit" in bad.output


def test_list_quiet_prints_paths_in_order(tmp_path: Path) -> None:
    data = _populate(tmp_path / "data", "prefix_20230201.log", "other.txt", "prefix_20230101.log")

    result = _invoke(tmp_path, "list", TEMPLATE, str(data), "--quiet")

    assert result.exit_code == 0
    names = [Path(line).name for line in result.output.splitlines()]
    assert names == ["prefix_20230101.log", "prefix_20230201.log"]


def test_list_json_with_filters(tmp_path: Path) -> None:
    data = _populate(
        tmp_path / "data", "prefix_20230101.log", "prefix_20230201.log", "prefix_20230301.log"
    )

    result = _invoke(
        tmp_path, "list", TEMPLATE, str(data), "--since", "20230115", "--before", "20230301", "--json"
    )

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert [entry["name"] for entry in payload["files"]] == ["prefix_20230201.log"]
    assert payload["template"] == TEMPLATE
    assert payload["skipped"] == {}


def test_list_table_output(tmp_path: Path) -> None:
    data = _populate(tmp_path / "data", "prefix_20230101.log")

    result = _invoke(tmp_path, "list", TEMPLATE, str(data))

    assert result.exit_code == 0
    assert "prefix_20230101.log" in result.output
    assert "1 of 1 matching file(s)." in result.output


def test_list_missing_directory(tmp_path: Path) -> None:
    result = _invoke(tmp_path, "list", TEMPLATE, str(tmp_path / "missing"), "--json")

    assert result.exit_code == 1
    payload = json.loads(result.output)
    assert payload["error"]["code"] == "directory_error"
    assert payload["error"]["details"]["exception"] == "DirectoryNotFound"


def test_has_reports_presence_through_exit_code(tmp_path: Path) -> None:
    data = _populate(tmp_path / "data", "prefix_20230101.log")

    assert _invoke(tmp_path, "has", TEMPLATE, str(data), "20230101").exit_code == 0
    assert _invoke(tmp_path, "has", TEMPLATE, str(data), "20230301").exit_code == 1


def test_daily_lists_each_day_through_today(tmp_path: Path) -> None:
    start = date.today() - timedelta(days=2)

    result = _invoke(tmp_path, "daily", TEMPLATE, start.strftime("%Y%m%d"))
    trimmed = _invoke(
        tmp_path, "daily", TEMPLATE, start.strftime("%Y%m%d"), "--exclude-today", "--exclude-start"
    )

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert len(lines) == 3
    assert lines[-1] == f"prefix_{date.today():%Y%m%d}.log"
    assert trimmed.output.splitlines() == lines[1:2]


def test_config_set_then_use_template_alias(tmp_path: Path) -> None:
    set_result = _invoke(
        tmp_path, "config", "set", "templates.daily", "--value", "daily_<%Y-%m-%d>.txt"
    )

    assert set_result.exit_code == 0
    assert "Updated templates.daily" in set_result.output

    result = _invoke(tmp_path, "name", "daily", "20230615")
    assert result.output.strip() == "daily_2023-06-15.txt"


def test_config_set_rejects_invalid_values(tmp_path: Path) -> None:
    result = _invoke(tmp_path, "config", "set", "templates.bad", "--value", "<%m%Y%d>")

    assert result.exit_code == 1
    assert "Invalid configuration values" in result.output


def test_config_set_json_default_changes_output(tmp_path: Path) -> None:
    assert _invoke(tmp_path, "config", "set", "cli.json_default", "--value", "true").exit_code == 0

    result = _invoke(tmp_path, "parse", "20230615")

    assert json.loads(result.output)["datetime"] == "2023-06-15T00:00:00"


def test_environment_overrides_apply(tmp_path: Path) -> None:
    result = _invoke(
        tmp_path, "parse", "20230615", env={"DATEDFILES__CLI__DATETIME_FORMAT": "%d/%m/%Y"}
    )

    assert result.output.strip() == "15/06/2023"


def test_config_view_creates_and_displays_config(tmp_path: Path) -> None:
    result = _invoke(tmp_path, "config", "view")

    assert result.exit_code == 0
    assert "templates" in result.output
    assert (tmp_path / "config" / "config.yaml").exists()


def test_config_edit_applies_changes(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def _mock_edit(text: str, **_: Any) -> str:
        return text.replace("json_default: false", "json_default: true")

    monkeypatch.setattr("datedfiles.cli.click.edit", _mock_edit)

    result = _invoke(tmp_path, "config", "edit")

    assert result.exit_code == 0
    assert "updated" in result.output.lower()
    assert "json_default: true" in (tmp_path / "config" / "config.yaml").read_text(encoding="utf-8")
