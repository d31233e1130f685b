"""Key events understood by the browser and decoding of raw terminal input."""

from __future__ import annotations

import enum


class Key(str, enum.Enum):
    """Discrete input events fed to :class:`~apium.tui.navigator.Navigator`."""

    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    ENTER = "enter"
    QUIT = "quit"
    INTERRUPT = "interrupt"
    OTHER = "other"


# CSI (ESC [) and SS3 (ESC O, application cursor mode) arrow sequences
_SEQUENCES: dict[bytes, Key] = {
    b"\x1b[A": Key.UP,
    b"\x1b[B": Key.DOWN,
    b"\x1b[C": Key.RIGHT,
    b"\x1b[D": Key.LEFT,
    b"\x1bOA": Key.UP,
    b"\x1bOB": Key.DOWN,
    b"\x1bOC": Key.RIGHT,
    b"\x1bOD": Key.LEFT,
    b"\r": Key.ENTER,
    b"\n": Key.ENTER,
    b"\r\n": Key.ENTER,
    b"q": Key.QUIT,
    b"\x03": Key.INTERRUPT,
}


def decode_key(data: bytes) -> Key:
    """Map the bytes of one keypress to a :class:`Key`.

    Unrecognised input (letters, function keys, modified arrows) decodes to
    :attr:`Key.OTHER`, which only has an effect in the detail view.
    """
    return _SEQUENCES.get(data, Key.OTHER)


def is_exit_key(key: Key) -> bool:
    """Return True for the keys that end the session from any view."""
    return key in (Key.QUIT, Key.INTERRUPT)
