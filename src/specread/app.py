"""Typer application and console-script entry point for specread."""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from specread import __version__
from specread.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INVALID_USAGE
from specread.models import MAX_DEPTH_LIMIT

app = typer.Typer(
    name="specread",
    help="Decode OpenAPI 3.x documents and report what they contain.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
    pretty_exceptions_enable=False,
)

from specread.commands.config import config_app  # noqa: E402
from specread.commands.inspect import inspect_app  # noqa: E402
from specread.commands.paths import paths_command  # noqa: E402

app.command("paths")(paths_command)
app.add_typer(inspect_app, name="inspect", help="Inspect a decoded document.")
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"specread {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
    max_depth: Optional[int] = typer.Option(
        None, "--max-depth", min=1, max=MAX_DEPTH_LIMIT, help="Maximum document nesting depth."
    ),
    strict_default_response: Optional[bool] = typer.Option(
        None,
        "--strict-default-response/--lenient-default-response",
        help="Fail on a malformed 'default' response instead of dropping it.",
    ),
) -> None:
    """Resolve the effective config, install output and logging, and hand
    the config to sub-commands as ``ctx.obj["config"]``.
    """
    from specread.config import resolve_config
    from specread.exceptions import SpecreadError
    from specread.output import OutputFormat, OutputManager, configure_logging, error, set_output

    cli_format = "json" if json_output else "plain" if plain_output else None
    try:
        config = resolve_config(
            cli_max_depth=max_depth,
            cli_strict_default_response=strict_default_response,
            cli_format=cli_format,
        )
    except SpecreadError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    try:
        fmt = OutputFormat(config.output.format)
    except ValueError:
        error(f"Unknown output format: {config.output.format}")
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))
    configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


def _setup_signal_handlers() -> None:
    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log() -> str:
    """Write the traceback being handled to ``<data dir>/logs`` and return its path."""
    from specread.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"crash-{datetime.now():%Y%m%d-%H%M%S}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """Run the app. A ``SpecreadError`` exits with its own code; anything
    else unexpected leaves a crash log and exits 1.
    """
    from specread.exceptions import SpecreadError
    from specread.output import error

    _setup_signal_handlers()
    try:
        app()
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except SpecreadError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception:
        error(f"Unexpected error. Debug log: {_write_crash_log()}")
        sys.exit(EXIT_GENERIC_FAILURE)
