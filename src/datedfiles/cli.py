"""Command line interface for datedfiles."""

from __future__ import annotations

import difflib
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Iterable, Optional

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from rich.table import Table

from datedfiles.config import (
    ConfigError,
    ConfigManager,
    DatedFilesConfig,
    assign_nested,
    resolve_with_precedence,
)
from datedfiles.dated_file import DatedFile
from datedfiles.dateish import parse_dateish
from datedfiles.directory import DirectoryView
from datedfiles.errors import (
    DatedFilesError,
    DirectoryError,
    InvalidDateFormat,
    InvalidTemplateFormat,
    TemplateMismatch,
)
from datedfiles.naming import DateNamedFiles

console = Console()
err_console = Console(stderr=True)

LOGGER = logging.getLogger(__name__)

_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
_RELATIVE_DAYS = {"today": 0, "now": 0, "yesterday": -1, "tomorrow": 1}


@dataclass
class CLIState:
    """Per-invocation state shared between the group and its commands.

    Attributes:
        manager: Configuration manager for the selected config file.
        log_level: Log level given on the command line, if any.
        config: Effective configuration, loaded on first use.
    """

    manager: ConfigManager
    log_level: Optional[str] = None
    config: Optional[DatedFilesConfig] = field(default=None)


def _load_config(ctx: click.Context) -> DatedFilesConfig:
    """Load (once) the effective configuration and apply its logging settings.

    Raises:
        click.ClickException: If the configuration cannot be loaded.
    """

    state: CLIState = ctx.ensure_object(CLIState)
    if state.config is None:
        try:
            state.config = state.manager.load()
        except ConfigError as exc:
            raise click.ClickException(str(exc)) from exc
        _configure_logging(state.log_level or state.config.logging.level)
    return state.config


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    details: Any | None = None,
    original: Exception | None = None,
) -> None:
    """Emit a standardized error and terminate the command.

    Args:
        message: Human-readable error message.
        code: Machine-readable error identifier.
        json_output: Indicates whether JSON mode is active.
        details: Optional structured details to include in the payload.
        original: Original exception for chaining when not using JSON.

    Raises:
        SystemExit: When emitting JSON output to terminate the command.
        click.ClickException: For non-JSON flows to surface the error.
    """

    if json_output:
        payload: dict[str, Any] = {"error": {"code": code, "message": message}}
        if details is not None:
            payload["error"]["details"] = details
        console.print_json(data=payload)
        raise SystemExit(1)

    raise click.ClickException(message) from original


def _error_code(exc: DatedFilesError) -> str:
    if isinstance(exc, InvalidTemplateFormat):
        return "invalid_template"
    if isinstance(exc, TemplateMismatch):
        return "template_mismatch"
    if isinstance(exc, InvalidDateFormat):
        return "invalid_date"
    if isinstance(exc, DirectoryError):
        return "directory_error"
    return "error"


def _fail(exc: DatedFilesError, *, json_output: bool) -> None:
    _handle_cli_error(
        str(exc),
        code=_error_code(exc),
        json_output=json_output,
        details={"exception": type(exc).__name__},
        original=exc,
    )


def _resolve_date(value: str) -> Any:
    """Turn `today`/`now`/`yesterday`/`tomorrow` into datetimes; leave other values as-is."""

    offset = _RELATIVE_DAYS.get(value.strip().lower())
    if offset is None:
        return value
    return datetime.now() + timedelta(days=offset)


def _json_enabled(config: DatedFilesConfig, json_output: bool) -> bool:
    return json_output or config.cli.json_default


def _file_payload(dated: DatedFile, fmt: str) -> dict[str, str]:
    return {
        "name": dated.filename,
        "path": str(dated.path),
        "datetime": dated.datetime.isoformat(),
        "display": dated.datetime.strftime(fmt),
    }


def _config_lines(manager: ConfigManager) -> list[str]:
    return [
        line for line in manager.read_text().splitlines() if not line.startswith("# Last updated:")
    ]


def _render_files(title: str, files: Iterable[DatedFile], fmt: str) -> Table:
    table = Table(title=title)
    table.add_column("Date", style="cyan", no_wrap=True)
    table.add_column("Name")
    for dated in files:
        table.add_row(dated.datetime.strftime(fmt), dated.filename)
    return table


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="datedfiles")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Configuration file to use instead of ~/.datedfiles/config.yaml.",
)
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    help="Override the configured logging level.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], log_level: Optional[str]) -> None:
    """datedfiles names, matches, and lists files whose names embed a date.

    TEMPLATE arguments are template strings such as 'daily_<%Y-%m-%d>.txt'
    or the name of a template configured under `templates`.
    """
    ctx.obj = CLIState(manager=ConfigManager(config_path), log_level=log_level)


@cli.command()
@click.argument("template")
@click.argument("date", required=False, default="now")
@click.option("--dir", "directory", type=click.Path(file_okay=False, path_type=Path), help="Prefix the name with this directory.")
@click.option("--json", "json_output", is_flag=True, help="Emit JSON.")
@click.pass_context
def name(
    ctx: click.Context,
    template: str,
    date: str,
    directory: Optional[Path],
    json_output: bool,
) -> None:
    """Print the name TEMPLATE produces for DATE (default: now)."""
    config = _load_config(ctx)
    json_enabled = _json_enabled(config, json_output)
    try:
        dated = DatedFile.from_date(
            config.resolve_template(template), _resolve_date(date), directory=directory
        )
    except DatedFilesError as exc:
        _fail(exc, json_output=json_enabled)
        return

    if json_enabled:
        console.print_json(data=_file_payload(dated, config.cli.datetime_format))
        return
    click.echo(str(dated.path))


@cli.command()
@click.argument("template")
@click.argument("filename")
@click.option("--json", "json_output", is_flag=True, help="Emit JSON.")
@click.pass_context
def match(ctx: click.Context, template: str, filename: str, json_output: bool) -> None:
    """Print the date embedded in FILENAME; exit with status 1 if it does not match TEMPLATE."""
    config = _load_config(ctx)
    json_enabled = _json_enabled(config, json_output)
    try:
        compiled = config.resolve_template(template)
        matched = compiled.matches(filename)
        moment = compiled.extract_date(filename) if matched else None
    except DatedFilesError as exc:
        _fail(exc, json_output=json_enabled)
        return

    if json_enabled:
        console.print_json(
            data={
                "match": matched,
                "datetime": moment.isoformat() if moment is not None else None,
            }
        )
    elif moment is not None:
        click.echo(moment.strftime(config.cli.datetime_format))
    else:
        err_console.print(f"[yellow]'{filename}' does not match '{compiled.template_string}'.[/yellow]")
    if moment is None:
        ctx.exit(1)


@cli.command()
@click.argument("value")
@click.option("--json", "json_output", is_flag=True, help="Emit JSON.")
@click.pass_context
def parse(ctx: click.Context, value: str, json_output: bool) -> None:
    """Print the date-time a date-ish VALUE stands for."""
    config = _load_config(ctx)
    json_enabled = _json_enabled(config, json_output)
    try:
        moment = parse_dateish(_resolve_date(value))
    except DatedFilesError as exc:
        _fail(exc, json_output=json_enabled)
        return

    if json_enabled:
        console.print_json(data={"input": value, "datetime": moment.isoformat()})
        return
    click.echo(moment.strftime(config.cli.datetime_format))


@cli.command(name="list")
@click.argument("template")
@click.argument("directory", type=click.Path(path_type=Path))
@click.option("--since", help="Only files dated on or after this date.")
@click.option("--after", help="Only files dated after this date.")
@click.option("--before", help="Only files dated before this date.")
@click.option("--on-or-before", "on_or_before", help="Only files dated on or before this date.")
@click.option("--json", "json_output", is_flag=True, help="Emit JSON.")
@click.option("--quiet", is_flag=True, help="Print bare paths, one per line.")
@click.pass_context
def list_files(
    ctx: click.Context,
    template: str,
    directory: Path,
    since: Optional[str],
    after: Optional[str],
    before: Optional[str],
    on_or_before: Optional[str],
    json_output: bool,
    quiet: bool,
) -> None:
    """List the files in DIRECTORY matching TEMPLATE, oldest first."""
    config = _load_config(ctx)
    json_enabled = _json_enabled(config, json_output)
    quiet = quiet or config.cli.quiet_default
    try:
        view = DirectoryView.open(config.resolve_template(template), directory)
        selected = list(view)
        LOGGER.debug("Scanned %s: %d match(es), %d skipped", view.path, len(view), len(view.skipped))
        for query, value in (
            (view.since, since),
            (view.after, after),
            (view.before, before),
            (view.on_or_before, on_or_before),
        ):
            if value is None:
                continue
            keep = {dated.filename for dated in query(_resolve_date(value))}
            selected = [dated for dated in selected if dated.filename in keep]
    except DatedFilesError as exc:
        _fail(exc, json_output=json_enabled)
        return

    fmt = config.cli.datetime_format
    if json_enabled:
        console.print_json(
            data={
                "directory": str(view.path),
                "template": view.template.template_string,
                "files": [_file_payload(dated, fmt) for dated in selected],
                "skipped": view.skipped,
            }
        )
        return
    if quiet:
        for dated in selected:
            click.echo(str(dated.path))
        return

    console.print(_render_files(f"{view.template.template_string} in {view.path}", selected, fmt))
    for skipped_name, reason in view.skipped.items():
        err_console.print(f"[yellow]Skipped {skipped_name}: {reason}[/yellow]")
    console.print(f"[green]{len(selected)} of {len(view)} matching file(s).[/green]")


@cli.command()
@click.argument("template")
@click.argument("directory", type=click.Path(path_type=Path))
@click.argument("date", required=False, default="today")
@click.pass_context
def has(ctx: click.Context, template: str, directory: Path, date: str) -> None:
    """Exit with status 0 if DIRECTORY holds the TEMPLATE file for DATE (default: today), else 1."""
    config = _load_config(ctx)
    try:
        view = DirectoryView.open(config.resolve_template(template), directory)
        target = view.at(_resolve_date(date))
        present = view.has_file_for_date(target)
    except DatedFilesError as exc:
        _fail(exc, json_output=False)
        return

    if not config.cli.quiet_default:
        status = "[green]present[/green]" if present else "[red]missing[/red]"
        console.print(f"{target.path}: {status}")
    if not present:
        ctx.exit(1)


@cli.command()
@click.argument("template")
@click.argument("start")
@click.option("--dir", "directory", type=click.Path(file_okay=False, path_type=Path), help="Prefix names with this directory.")
@click.option("--exclude-today", is_flag=True, help="Stop at yesterday.")
@click.option("--exclude-start", is_flag=True, help="Begin the day after START.")
@click.option("--json", "json_output", is_flag=True, help="Emit JSON.")
@click.pass_context
def daily(
    ctx: click.Context,
    template: str,
    start: str,
    directory: Optional[Path],
    exclude_today: bool,
    exclude_start: bool,
    json_output: bool,
) -> None:
    """Print the TEMPLATE name for every day from START through today."""
    config = _load_config(ctx)
    json_enabled = _json_enabled(config, json_output)
    try:
        named = DateNamedFiles(config.resolve_template(template), directory)
        start_value = _resolve_date(start)
        if exclude_start:
            files = list(named.daily_after(start_value))
            if exclude_today and files and files[-1].date == datetime.now().date():
                files.pop()
        elif exclude_today:
            files = list(named.daily_through_yesterday(start_value))
        else:
            files = list(named.daily_since(start_value))
    except DatedFilesError as exc:
        _fail(exc, json_output=json_enabled)
        return

    if json_enabled:
        fmt = config.cli.datetime_format
        console.print_json(data={"files": [_file_payload(dated, fmt) for dated in files]})
        return
    for dated in files:
        click.echo(str(dated.path))


@cli.group()
def config() -> None:
    """Manage datedfiles configuration files and overrides."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
@click.pass_context
def config_view(ctx: click.Context, no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules."""
    manager = ctx.ensure_object(CLIState).manager
    try:
        manager.ensure_exists()
        effective = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(effective.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
@click.pass_context
def config_set(ctx: click.Context, key: str, value: str) -> None:
    """Persist a configuration value expressed as a dotted KEY such as `cli.json_default`."""
    manager = ctx.ensure_object(CLIState).manager
    manager.ensure_exists()

    segments = [segment.strip() for segment in key.split(".") if segment.strip()]
    if not segments:
        raise click.ClickException("KEY must specify a dotted path such as 'logging.level'.")

    try:
        parsed_value = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    before = _config_lines(manager)
    try:
        previous = manager.load_file_overrides()
        file_data = manager.load_file_overrides()
        assign_nested(file_data, segments, parsed_value)
        resolve_with_precedence(defaults=DatedFilesConfig(), file_overrides=file_data)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    if file_data == previous:
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return

    manager.save(file_data)
    diff = list(
        difflib.unified_diff(
            before,
            _config_lines(manager),
            fromfile="config.yaml (before)",
            tofile="config.yaml (after)",
            lineterm="",
        )
    )
    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {'.'.join(segments)}.[/green]")


@config.command("edit")
@click.pass_context
def config_edit(ctx: click.Context) -> None:
    """Open the configuration file in an editor and validate the result."""
    manager = ctx.ensure_object(CLIState).manager
    manager.ensure_exists()

    original = manager.read_text()
    edited = click.edit(original, extension=".yaml")
    if edited is None or edited == original:
        console.print("[yellow]No changes detected.[/yellow]")
        return

    try:
        parsed = yaml.safe_load(edited) or {}
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Invalid YAML: {exc}") from exc
    if not isinstance(parsed, dict):
        raise click.ClickException("Configuration file must contain a top-level mapping.")

    try:
        resolve_with_precedence(defaults=DatedFilesConfig(), file_overrides=parsed)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    manager.save(parsed)
    console.print("[green]Configuration updated successfully.[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()
