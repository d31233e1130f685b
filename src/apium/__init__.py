"""apium -- browse OpenAPI 3.x documents interactively in the terminal.

This package reads an OpenAPI specification (from stdin, a file, or a URL),
flattens it into endpoint and schema records, and opens a full-screen
browser where endpoints can be filtered by HTTP method (or tag), selected,
and inspected in detail.

Typical workflow::

    cat openapi.yaml | apium          # interactive browser
    apium --plain paths openapi.yaml  # non-interactive listing

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic records produced by the flattener.
    config: XDG-aware viewer configuration with precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes.
    output: stdout/stderr diagnostics with Rich support.
    parser: Loading, ``$ref`` resolution, and flattening.
    tui: Navigation state machine, render models, and terminal I/O.
"""

__version__ = "0.3.0"
