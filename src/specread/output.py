"""Terminal output for the specread CLI.

Decoded data (path names, tables, records, re-encoded JSON) is written to
stdout and nothing else is. Status lines, warnings, errors and debug traces
go to stderr, so ``specread paths openapi.json | xargs ...`` never sees them.

One :class:`OutputManager` is installed per invocation by
:func:`specread.app.main_callback`; commands reach it through the
module-level helpers (:func:`print_list`, :func:`error`, ...).
"""

from __future__ import annotations

import json
import logging
import os
import sys
from collections.abc import Mapping
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text


class OutputFormat(str, Enum):
    """How data is rendered on stdout. ``AUTO`` picks ``RICH`` on a colour TTY."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Renders data on stdout and diagnostics on stderr.

    Args:
        format: Requested format; ``AUTO`` is resolved once, here.
        no_color: Disable colour on both streams. ``NO_COLOR`` and
            ``TERM=dumb`` have the same effect.
        quiet: Hide info and success lines. Warnings and errors still show.
        verbose: Show debug lines.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        if format == OutputFormat.AUTO:
            format = OutputFormat.RICH if _is_tty() and not self._no_color else OutputFormat.PLAIN
        self._format = format
        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=format == OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    # --- stdout ---

    def print_data(self, text: str) -> None:
        print(text, file=sys.stdout, flush=True)

    def print_list(self, items: list[str], title: Optional[str] = None) -> None:
        """One item per line, a JSON array, or a one-column table."""
        if self._format == OutputFormat.JSON:
            self._print_json(items)
        elif self._format == OutputFormat.PLAIN:
            for item in items:
                self.print_data(item)
        else:
            self._print_rich_table([title or "Name"], [[item] for item in items], title)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Tab-separated rows under a header line, JSON records, or a table.

        The title is only shown in rich mode.
        """
        if self._format == OutputFormat.JSON:
            self._print_json([dict(zip(headers, row)) for row in rows])
        elif self._format == OutputFormat.PLAIN:
            for row in [headers, *rows]:
                self.print_data("\t".join(row))
        else:
            self._print_rich_table(headers, rows, title)

    def print_record(self, record: Mapping[str, Any]) -> None:
        """Print one record of named values.

        JSON mode keeps nesting. Plain and rich modes flatten nested
        mappings to dotted keys (``decoder.max_depth``) and join lists with
        commas.
        """
        if self._format == OutputFormat.JSON:
            self._print_json(record)
            return
        rows = [[key, _scalar_text(value)] for key, value in _flatten(record)]
        if self._format == OutputFormat.PLAIN:
            for row in rows:
                self.print_data("\t".join(row))
        else:
            self._print_rich_table(["Key", "Value"], rows)

    def _print_json(self, data: Any) -> None:
        self.print_data(json.dumps(data, indent=2, ensure_ascii=False))

    def _print_rich_table(
        self, headers: list[str], rows: list[list[str]], title: Optional[str] = None
    ) -> None:
        table = Table(title=title, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*row)
        self._stdout.print(table)

    # --- stderr ---

    def info(self, message: str) -> None:
        if not self._quiet:
            self._note(message)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._note(message, style="green")

    def warning(self, message: str) -> None:
        self._note(message, label="Warning: ", style="yellow")

    def error(self, message: str) -> None:
        self._note(message, label="Error: ", style="bold red")

    def debug(self, message: str) -> None:
        if self._verbose:
            self._note(message, label="[debug] ", style="dim")

    def _note(self, message: str, label: str = "", style: str = "") -> None:
        # Text renders brackets literally, so pointers like /tags/[0] survive.
        if self._no_color:
            print(f"{label}{message}", file=sys.stderr, flush=True)
        elif label:
            self._stderr.print(Text.assemble((label, style), message))
        else:
            self._stderr.print(Text(message, style=style))


def _flatten(record: Mapping[str, Any], prefix: str = "") -> list[tuple[str, Any]]:
    items: list[tuple[str, Any]] = []
    for key, value in record.items():
        name = f"{prefix}{key}"
        if isinstance(value, Mapping):
            items.extend(_flatten(value, f"{name}."))
        else:
            items.append((name, value))
    return items


def _scalar_text(value: Any) -> str:
    if isinstance(value, list):
        return ", ".join(str(item) for item in value)
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """``NO_COLOR`` set to anything, or ``TERM=dumb``."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


# --- Global instance ---

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed manager, creating a default one on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager (tests swap sys.stdout between runs)."""
    global _output
    _output = None


def print_data(text: str) -> None:
    get_output().print_data(text)


def print_list(items: list[str], title: Optional[str] = None) -> None:
    get_output().print_list(items, title)


def print_table(headers: list[str], rows: list[list[str]], title: Optional[str] = None) -> None:
    get_output().print_table(headers, rows, title)


def print_record(record: Mapping[str, Any]) -> None:
    get_output().print_record(record)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)


# --- Logging bridge ---


class OutputLogHandler(logging.Handler):
    """Send ``specread.*`` log records to stderr through the installed manager.

    The manager is looked up per record, never cached on the handler.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            output = get_output()
            if record.levelno >= logging.ERROR:
                output.error(message)
            elif record.levelno >= logging.WARNING:
                output.warning(message)
            else:
                output.debug(message)
        except Exception:
            self.handleError(record)


def configure_logging(verbose: bool = False) -> None:
    """Route the ``specread`` logger through :class:`OutputLogHandler`.

    DEBUG records pass only with *verbose*. Repeated calls adjust the level
    and never stack handlers.
    """
    logger = logging.getLogger("specread")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(handler, OutputLogHandler) for handler in logger.handlers):
        handler = OutputLogHandler()
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)
