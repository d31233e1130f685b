"""Interactive endpoint browser -- state machine, rendering, terminal I/O.

Typical usage::

    from apium.tui import Navigator, TTYTerminal, run_session

    navigator = Navigator(endpoints, document=raw, info=info)
    with TTYTerminal(console) as terminal:
        run_session(navigator, terminal)

Sub-modules:

* :mod:`~apium.tui.keys` -- :class:`Key` events and raw input decoding.
* :mod:`~apium.tui.navigator` -- The list/detail state machine producing
  render models.
* :mod:`~apium.tui.render` -- Render models to Rich text lines.
* :mod:`~apium.tui.terminal` -- The :class:`Terminal` interface, the TTY
  implementation, and the session loop.
"""

from apium.tui.keys import Key, decode_key
from apium.tui.navigator import Navigator, build_filters
from apium.tui.terminal import Terminal, TTYTerminal, run_session

__all__ = [
    "Key",
    "decode_key",
    "Navigator",
    "build_filters",
    "Terminal",
    "TTYTerminal",
    "run_session",
]
