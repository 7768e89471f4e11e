"""Command-line interface for inspecting and exercising the shipping core.

Purpose
-------
Give device operators a small tool to flip the persisted verbose flag and to
replay captured log lines through the real pipeline, printing what would have
been shipped.

Contents
--------
* :func:`cli` - Click group with global ``--traceback`` and ``--use-dotenv``.
* ``info`` / ``verbose`` / ``replay`` subcommands.
* :func:`main` - entry point running the group through ``lib_cli_exit_tools``.
"""

from __future__ import annotations

import os
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, Sequence

import click
import lib_cli_exit_tools

from . import __init__conf__
from . import config as log_config
from .__init__conf__ import summary_info
from .adapters import FileVerboseStore, RichConsoleSink
from .domain import LogEvent, LogLevel
from . import runtime

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group(
    help=__init__conf__.title,
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=True,
)
@click.version_option(version=__init__conf__.version, prog_name=__init__conf__.shell_command)
@click.option("--traceback/--no-traceback", default=False, help="Show full Python tracebacks on errors.")
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=False,
    help="Load environment variables from a nearby .env before running commands.",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool, use_dotenv: bool) -> None:
    """Root command; prints the metadata banner when no subcommand is given."""

    explicit: bool | None = None
    if ctx.get_parameter_source("use_dotenv") is not click.core.ParameterSource.DEFAULT:
        explicit = use_dotenv
    if log_config.should_use_dotenv(explicit=explicit, env_value=os.getenv(log_config.DOTENV_ENV_VAR)):
        log_config.enable_dotenv()

    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback

    if ctx.invoked_subcommand is None:
        click.echo(summary_info(), nl=False)


@cli.command("info")
def cli_info() -> None:
    """Print the package metadata banner."""

    click.echo(summary_info(), nl=False)


@cli.command("verbose")
@click.argument("state", type=click.Choice(["on", "off", "status"]), default="status")
@click.option(
    "--file",
    "verbose_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Verbose flag file (defaults to LOG_SHIP_VERBOSE_FILE or the built-in path).",
)
def cli_verbose(state: str, verbose_file: Path | None) -> None:
    """Show or change the persisted verbose flag."""

    path = verbose_file or Path(log_config.coerce_options(log_config.env_overrides()).verbose_file)
    store = FileVerboseStore(path)
    if state == "status":
        click.echo("on" if store.read() else "off")
        return
    if not store.write(state == "on"):
        raise click.ClickException(f"could not write verbose flag to {path}")
    click.echo(state)


@cli.command("replay")
@click.argument("source", type=click.File("r", encoding="utf-8"))
@click.option("--level", default="info", show_default=True, help="Level assigned to every replayed line.")
@click.option("--format", "template", default="{message}", show_default=True, help="Line template.")
@click.option("--buffer-size", type=click.IntRange(min=0), default=None)
@click.option("--max-bytes", type=click.IntRange(min=0), default=None)
@click.option("--throttle/--no-throttle", "throttle_enabled", default=None)
@click.option("--throttle-window", type=click.FloatRange(min=0), default=None, help="Seconds.")
@click.option("--throttle-max-repeats", type=click.IntRange(min=0), default=None)
@click.option("--exclude", multiple=True, help="Drop lines containing this text (repeatable).")
@click.option("--immediate", multiple=True, help="Ship lines containing this text at once (repeatable).")
@click.option("--verbose/--no-verbose", "verbose", default=False, help="Ship every line immediately.")
@click.option("--color/--no-color", default=False)
def cli_replay(
    source: IO[str],
    level: str,
    template: str,
    buffer_size: int | None,
    max_bytes: int | None,
    throttle_enabled: bool | None,
    throttle_window: float | None,
    throttle_max_repeats: int | None,
    exclude: tuple[str, ...],
    immediate: tuple[str, ...],
    verbose: bool,
    color: bool,
) -> None:
    """Feed each line of SOURCE through the pipeline and print shipped payloads."""

    try:
        line_level = LogLevel.from_name(level)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--level") from exc

    options = {
        "format": template,
        "buffer_size": buffer_size,
        "max_message_bytes": max_bytes,
        "throttle_enabled": throttle_enabled,
        "throttle_window_sec": throttle_window,
        "throttle_max_repeats": throttle_max_repeats,
        "exclude_message_containing": list(exclude) if exclude else None,
        "immediate_send_containing": list(immediate) if immediate else None,
    }
    sink = RichConsoleSink(colorize=color)
    runtime.init(sink=sink, verbose=verbose, **{key: value for key, value in options.items() if value is not None})
    outcomes: Counter[str] = Counter()
    try:
        for raw in source:
            line = raw.rstrip("\r\n")
            if not line:
                continue
            result = runtime.handle(LogEvent(line_level, line, datetime.now(timezone.utc)))
            outcomes[result["outcome"]] += 1
    finally:
        runtime.shutdown()
    summary = ", ".join(f"{name}={count}" for name, count in sorted(outcomes.items()))
    click.echo(f"replayed {sum(outcomes.values())} lines, {sink.payloads} payloads shipped ({summary})", err=True)


def main(argv: Sequence[str] | None = None, *, restore_traceback: bool = True) -> int:
    """Run the CLI through ``lib_cli_exit_tools`` and return the exit code.

    Traceback preferences toggled by ``--traceback`` are restored afterwards
    so embedding hosts keep their own settings.
    """

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        return lib_cli_exit_tools.run_cli(
            cli,
            argv=list(argv) if argv is not None else None,
            prog_name=__init__conf__.shell_command,
        )
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


__all__ = ["cli", "main"]
