"""Shared test fixtures for apium.

Provides reusable fixtures for loading the petstore document, creating
isolated config environments, managing output state, scripting the terminal,
and running CLI commands.  These fixtures are automatically discovered by
pytest and available to all test modules without explicit imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Iterable, Sequence

import pytest
import yaml
from rich.text import Text

from apium.models import Endpoint
from apium.output import OutputFormat, OutputManager, reset_output, set_output
from apium.tui.keys import Key
from apium.tui.terminal import Terminal


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale.
    Resetting forces a fresh manager to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Document fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_path() -> Path:
    return FIXTURES_DIR / "petstore.yaml"


@pytest.fixture
def petstore_raw(petstore_path: Path) -> dict[str, Any]:
    """Load the raw petstore document."""
    return yaml.safe_load(petstore_path.read_text(encoding="utf-8"))


@pytest.fixture
def petstore_endpoints(petstore_raw: dict[str, Any]) -> list[Endpoint]:
    """Flattened petstore endpoints."""
    from apium.parser.flattener import flatten_endpoints

    return flatten_endpoints(petstore_raw)


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_CONFIG_HOME and XDG_DATA_HOME at subdirectories of tmp_path,
    forces the XDG layout, and clears all APIUM_* environment variables.

    Returns:
        The config directory apium reads ``config.json`` from.
    """
    monkeypatch.setattr("apium.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in ["APIUM_FILTER_BY", "APIUM_INCLUDE_ALL"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path / "config" / "apium"


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# Scripted terminal
# ---------------------------------------------------------------------------


class ScriptedTerminal(Terminal):
    """Terminal that replays a fixed key sequence and records every frame.

    When the script runs out it answers :attr:`Key.QUIT` so a session can
    never hang a test.
    """

    def __init__(self, keys: Iterable[Key], width: int = 80, height: int = 24) -> None:
        self._keys = list(keys)
        self.width = width
        self.height = height
        self.frames: list[list[str]] = []
        self.entered = False
        self.exited = False

    def __enter__(self) -> "ScriptedTerminal":
        self.entered = True
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.exited = True

    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def draw(self, lines: Sequence[Text]) -> None:
        self.frames.append([line.plain for line in lines])

    def read_key(self) -> Key:
        if not self._keys:
            return Key.QUIT
        return self._keys.pop(0)

    @property
    def last_frame(self) -> str:
        return "\n".join(self.frames[-1])


@pytest.fixture
def scripted_terminal() -> Callable[..., ScriptedTerminal]:
    """Factory for :class:`ScriptedTerminal` instances."""
    return ScriptedTerminal


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
