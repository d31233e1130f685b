"""Where apium writes: the browser screen and listings, and diagnostics.

Data and diagnostics never share a stream (the `clig.dev
<https://clig.dev/>`_ rule):

* **stdout** carries the browser screen, the ``bye!`` farewell, and the
  ``paths``/``schemas`` listings.
* **stderr** carries everything else: notices, warnings, errors and the
  ``--verbose`` trace of what the loader and flattener skipped.

Listings are drawn as a Rich table on an interactive terminal and as
tab-separated lines when piped; ``--json`` turns them into an array of
records.  ``NO_COLOR``, ``TERM=dumb`` and ``--no-color`` drop all styling.

:func:`~apium.app.main_callback` builds one :class:`OutputManager` per run
and installs it with :func:`set_output`; library code reports through the
module-level :func:`info`, :func:`warning`, :func:`error` and :func:`debug`.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import NamedTuple, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table


class OutputFormat(str, Enum):
    """How listings are written.  ``AUTO`` picks ``RICH`` or ``PLAIN`` from the TTY."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class _Channel(NamedTuple):
    """One kind of stderr diagnostic."""

    prefix: str
    markup: str
    quiet_hides: bool
    verbose_only: bool


# {prefix} and {text} are filled in per message
_CHANNELS: dict[str, _Channel] = {
    "info": _Channel("", "{text}", quiet_hides=True, verbose_only=False),
    "warning": _Channel(
        "Warning: ", "[yellow]{prefix}[/yellow]{text}", quiet_hides=False, verbose_only=False
    ),
    "error": _Channel(
        "Error: ", "[bold red]{prefix}[/bold red]{text}", quiet_hides=False, verbose_only=False
    ),
    "debug": _Channel(
        "[debug] ", "[dim]{prefix}{text}[/dim]", quiet_hides=False, verbose_only=True
    ),
}


class OutputManager:
    """Format preferences plus the two Rich consoles they apply to.

    Args:
        format: Listing format; ``AUTO`` becomes ``RICH`` on a colour-capable
            TTY and ``PLAIN`` otherwise.
        no_color: Turn off colour and markup (also forced by ``NO_COLOR`` and
            ``TERM=dumb``).
        quiet: Hide notices; warnings and errors still print.
        verbose: Show the ``[debug]`` trace.
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

        if format != OutputFormat.AUTO:
            self._format = format
        elif _is_tty() and not self._no_color:
            self._format = OutputFormat.RICH
        else:
            self._format = OutputFormat.PLAIN

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=self._format == OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def no_color(self) -> bool:
        """True when colour is off, whether by flag or by environment."""
        return self._no_color

    # ------------------------------------------------------------------ #
    # stdout
    # ------------------------------------------------------------------ #

    def print_data(self, text: str) -> None:
        print(text, file=sys.stdout, flush=True)

    def farewell(self, message: str = "bye!") -> None:
        """Print the line shown after the browser closes."""
        self.print_data(message)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Write a listing in the active format.

        JSON gives one object per row keyed by *headers*; plain gives a
        header line and one tab-separated line per row; Rich draws a table
        under *title*.
        """
        if self._format == OutputFormat.JSON:
            records = [dict(zip(headers, row)) for row in rows]
            self.print_data(json.dumps(records, indent=2, ensure_ascii=False))
            return

        if self._format == OutputFormat.PLAIN:
            for line in [headers, *rows]:
                self.print_data("\t".join(line))
            return

        table = Table(*headers, title=title, header_style="bold cyan")
        for row in rows:
            table.add_row(*row)
        self._stdout.print(table)

    # ------------------------------------------------------------------ #
    # stderr
    # ------------------------------------------------------------------ #

    def _emit(self, channel: _Channel, message: str) -> None:
        if channel.verbose_only and not self._verbose:
            return
        if channel.quiet_hides and self._quiet:
            return
        if self._no_color:
            print(f"{channel.prefix}{message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(
                channel.markup.format(prefix=escape(channel.prefix), text=escape(message))
            )

    def info(self, message: str) -> None:
        """Notice on stderr, hidden by ``--quiet``."""
        self._emit(_CHANNELS["info"], message)

    def warning(self, message: str) -> None:
        self._emit(_CHANNELS["warning"], message)

    def error(self, message: str) -> None:
        self._emit(_CHANNELS["error"], message)

    def debug(self, message: str) -> None:
        """Trace line on stderr, shown only with ``--verbose``."""
        self._emit(_CHANNELS["debug"], message)


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """``NO_COLOR`` (any value, even empty) or ``TERM=dumb`` turns colour off."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


# ------------------------------------------------------------------ #
# Process-wide manager
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed manager, creating an ``AUTO`` one on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager (tests swap stdout between runs)."""
    global _output
    _output = None


def info(message: str) -> None:
    get_output().info(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
