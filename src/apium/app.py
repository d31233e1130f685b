"""Typer application and CLI entry point for apium.

Running ``apium`` without a sub-command reads an OpenAPI document from stdin
and opens the interactive browser.  The sub-commands are:

* ``browse [SOURCE]`` -- the interactive browser for a file, URL, or stdin.
* ``paths [SOURCE]`` -- non-interactive endpoint listing.
* ``schemas [SOURCE]`` -- non-interactive ``components/schemas`` listing.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
Unhandled exceptions are written to a crash log under the data directory.

See Also:
    :mod:`apium.config`: Viewer configuration resolution.
    :mod:`apium.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer
from rich.console import Console

from apium import __version__
from apium.exceptions import ApiumError
from apium.exit_codes import EXIT_GENERIC_FAILURE
from apium.models import ViewerConfig
from apium.output import debug, error, get_output, info, warning
from apium.parser import (
    extract_info,
    flatten_endpoints,
    flatten_schemas,
    load_spec,
    validate_openapi_version,
)
from apium.parser.loader import STDIN_SOURCE
from apium.tui import Navigator, Terminal, TTYTerminal, run_session

app = typer.Typer(
    name="apium",
    help="Browse OpenAPI 3.x documents interactively in the terminal.",
    add_completion=False,
    rich_markup_mode="rich",
)

_SOURCE_HELP = "OpenAPI document: file path, http(s) URL, or '-' for stdin."


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"apium {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    filter_by: Optional[str] = typer.Option(
        None, "--filter-by", help="Build filter tabs from 'method' or 'tag'."
    ),
    include_all: Optional[bool] = typer.Option(
        None, "--all/--no-all", help="Show or hide the 'All' filter tab."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format for listings."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output for listings."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~apium.output.OutputManager` from CLI
    flags, resolves the :class:`~apium.models.ViewerConfig`, and stores it in
    ``ctx.obj``.  Without a sub-command the browser is opened on stdin.
    """
    from apium.config import resolve_config
    from apium.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(
        OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    )

    try:
        config = resolve_config(
            cli_filter_by=filter_by,
            cli_include_all=include_all,
            cli_no_color=no_color,
        )
    except ApiumError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    debug(f"Viewer config: {config.model_dump(mode='json')}")
    ctx.ensure_object(dict)
    ctx.obj["config"] = config

    if ctx.invoked_subcommand is None:
        _browse(config, STDIN_SOURCE)


# ------------------------------------------------------------------ #
# Commands
# ------------------------------------------------------------------ #


def _load_document(source: str) -> dict[str, Any]:
    """Load and validate the document, exiting with its error code on failure."""
    try:
        raw = load_spec(source)
        version = validate_openapi_version(raw)
    except ApiumError as exc:
        error(f"Error parsing OpenAPI: {exc}")
        raise typer.Exit(code=exc.exit_code) from None

    debug(f"Loaded OpenAPI {version} document from {source}")
    return raw


def _open_terminal(console: Console) -> Terminal:
    """Create the terminal the browser runs in."""
    return TTYTerminal(console)


def _browse(config: ViewerConfig, source: str) -> None:
    raw = _load_document(source)
    endpoints = flatten_endpoints(raw)
    debug(f"Flattened {len(endpoints)} endpoints")

    navigator = Navigator(
        endpoints,
        document=raw,
        info=extract_info(raw),
        filter_by=config.filter_by,
        include_all=config.include_all,
    )

    output = get_output()
    console = Console(no_color=output.no_color or config.no_color)
    try:
        with _open_terminal(console) as terminal:
            code = run_session(navigator, terminal)
    except ApiumError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    output.farewell()
    raise typer.Exit(code=code)


@app.command("browse")
def browse_command(
    ctx: typer.Context,
    source: str = typer.Argument(STDIN_SOURCE, help=_SOURCE_HELP),
) -> None:
    """Open the interactive endpoint browser.

    Keys: left/right switch filter, up/down move, Enter shows details, any
    key returns, q quits.

    Example::

        apium browse openapi.yaml
        cat openapi.yaml | apium
    """
    _browse(ctx.obj["config"], source)


@app.command("paths")
def paths_command(
    source: str = typer.Argument(STDIN_SOURCE, help=_SOURCE_HELP),
) -> None:
    """List all endpoints in document order.

    Example::

        apium --plain paths openapi.yaml
    """
    raw = _load_document(source)
    endpoints = flatten_endpoints(raw)
    if not endpoints:
        warning("No operations found under 'paths'.")

    headers = ["Method", "Path", "Summary", "Tags"]
    rows = [
        [e.method.value, e.path, e.summary or "-", ", ".join(e.tags)]
        for e in endpoints
    ]
    get_output().print_table(
        headers, rows, title=f"{extract_info(raw).heading} -- Paths ({len(rows)})"
    )


@app.command("schemas")
def schemas_command(
    source: str = typer.Argument(STDIN_SOURCE, help=_SOURCE_HELP),
) -> None:
    """List the schemas defined in ``components/schemas``.

    Shows each schema's type and up to five property names.
    """
    raw = _load_document(source)
    schemas = flatten_schemas(raw)

    if not schemas:
        info("No schemas defined in this spec.")
        return

    headers = ["Schema", "Type", "Properties"]
    rows: list[list[str]] = []
    for schema in schemas:
        body = schema.schema_ if isinstance(schema.schema_, dict) else {}
        if "$ref" in body:
            schema_type = "$ref"
        else:
            schema_type = str(body.get("type", "object")) if body else "unknown"
        prop_names = list(body.get("properties", {}) or {})
        props = ", ".join(prop_names[:5])
        if len(prop_names) > 5:
            props += "..."
        rows.append([schema.name, schema_type, props])

    get_output().print_table(headers, rows, title=f"Schemas ({len(rows)})")


# ------------------------------------------------------------------ #
# Entry point
# ------------------------------------------------------------------ #


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly outside the browser."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from apium.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``apium`` console script.

    Unhandled :class:`~apium.exceptions.ApiumError` instances cause a clean
    exit with the error's ``exit_code``. All other exceptions produce a crash
    log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        if isinstance(exc, ApiumError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
