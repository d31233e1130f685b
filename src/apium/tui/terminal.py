"""Terminal I/O and the interactive session loop.

The browser reads the OpenAPI document from stdin, so keypresses come from
the controlling terminal (``/dev/tty``) instead.  All terminal mutation --
raw key mode, clearing, drawing -- lives behind the :class:`Terminal`
interface so that :func:`run_session` can be driven by a scripted terminal in
tests.

:class:`TTYTerminal` is the real implementation.  Used as a context manager
it opens the TTY, switches it to raw key mode (no line buffering, no echo,
Ctrl-C delivered as a byte rather than a signal) and restores the saved mode
on exit, including when the session ends with an exception.
"""

from __future__ import annotations

import os
import select
from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

from rich.console import Console
from rich.text import Text

from apium.exceptions import TerminalError
from apium.exit_codes import EXIT_SUCCESS
from apium.output import debug
from apium.tui.keys import Key, decode_key
from apium.tui.navigator import Navigator
from apium.tui.render import render_view

DEFAULT_TTY = "/dev/tty"

# Remaining bytes of an escape sequence arrive together with ESC; wait briefly
_ESCAPE_TIMEOUT = 0.05
_MAX_SEQUENCE = 8


class Terminal(ABC):
    """Abstract terminal the session loop draws to and reads keys from.

    Terminals are context managers; the default enter/exit do nothing.
    """

    def __enter__(self) -> "Terminal":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        return None

    @abstractmethod
    def size(self) -> tuple[int, int]:
        """Return ``(width, height)`` in character cells."""
        ...

    @abstractmethod
    def draw(self, lines: Sequence[Text]) -> None:
        """Replace the whole screen with *lines*."""
        ...

    @abstractmethod
    def read_key(self) -> Key:
        """Block until one keypress is available and return it."""
        ...


def raw_mode_attributes(attrs: list[Any]) -> list[Any]:
    """Return a copy of termios *attrs* configured for single-key input.

    Canonical mode, echo, signal generation, flow control and CR-to-NL
    translation are turned off; output post-processing (``OPOST``) is kept so
    that ``\\n`` still returns the carriage when drawing.
    """
    import termios

    new = list(attrs)
    new[0] &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON)
    new[3] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
    cc = list(new[6])
    cc[termios.VMIN] = 1
    cc[termios.VTIME] = 0
    new[6] = cc
    return new


class TTYTerminal(Terminal):
    """Terminal backed by the controlling TTY and a Rich console.

    Args:
        console: Console used for drawing (normally writing to stdout).
        tty_path: Device to read keys from.
    """

    def __init__(self, console: Console, tty_path: str = DEFAULT_TTY) -> None:
        self._console = console
        self._tty_path = tty_path
        self._fd: Optional[int] = None
        self._saved: Optional[list[Any]] = None

    def __enter__(self) -> "TTYTerminal":
        import termios

        try:
            self._fd = os.open(self._tty_path, os.O_RDWR | os.O_NOCTTY)
        except OSError as exc:
            raise TerminalError(
                f"Cannot open terminal {self._tty_path} for key input: {exc}"
            ) from exc

        try:
            self._saved = termios.tcgetattr(self._fd)
            termios.tcsetattr(self._fd, termios.TCSAFLUSH, raw_mode_attributes(self._saved))
        except termios.error as exc:
            os.close(self._fd)
            self._fd = None
            raise TerminalError(f"{self._tty_path} is not a terminal: {exc}") from exc

        debug(f"Reading keys from {self._tty_path}")
        self._console.show_cursor(False)
        return self

    def __exit__(self, *exc_info: Any) -> None:
        import termios

        self._console.show_cursor(True)
        if self._fd is None:
            return
        try:
            if self._saved is not None:
                termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved)
        finally:
            os.close(self._fd)
            self._fd = None
            self._saved = None

    def size(self) -> tuple[int, int]:
        width, height = self._console.size
        return width, height

    def draw(self, lines: Sequence[Text]) -> None:
        self._console.clear()
        for line in lines:
            self._console.print(line, no_wrap=True, overflow="ellipsis")

    def read_key(self) -> Key:
        if self._fd is None:
            raise TerminalError("Terminal is not open")

        data = os.read(self._fd, 1)
        if not data:
            # TTY hung up
            return Key.INTERRUPT
        if data == b"\x1b":
            ready, _, _ = select.select([self._fd], [], [], _ESCAPE_TIMEOUT)
            if ready:
                data += os.read(self._fd, _MAX_SEQUENCE - 1)
        return decode_key(data)


def run_session(navigator: Navigator, terminal: Terminal) -> int:
    """Run the draw/read/transition loop until the user quits.

    One keypress produces exactly one transition followed by one full
    redraw.

    Returns:
        :data:`~apium.exit_codes.EXIT_SUCCESS`.
    """
    width, height = terminal.size()
    terminal.draw(render_view(navigator.render(), width, height))

    while True:
        key = terminal.read_key()
        view = navigator.handle(key)
        if view is None:
            debug(f"Session ended by {key.value} key")
            return EXIT_SUCCESS
        width, height = terminal.size()
        terminal.draw(render_view(view, width, height))
