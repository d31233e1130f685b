"""Load OpenAPI documents from stdin, a local file, or a URL.

This module handles all I/O for fetching raw OpenAPI documents and converting
them into Python dictionaries.  It supports both JSON and YAML formats with
automatic format detection, and validates that the document declares a
supported OpenAPI version (3.x).

The two public functions are:

* :func:`load_spec` -- Load and parse a document from any supported source.
* :func:`validate_openapi_version` -- Check and return the ``openapi``
  version string, rejecting Swagger 2.x and other majors.

After loading, the raw dict is handed to
:func:`~apium.parser.flattener.flatten_endpoints` and friends.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from apium.exceptions import SpecParseError

STDIN_SOURCE = "-"


def load_spec(source: str = STDIN_SOURCE) -> dict[str, Any]:
    """Load an OpenAPI document from URL, file path, or stdin (``'-'``).

    Args:
        source: A URL (http/https), file path, or ``'-'`` for stdin.

    Returns:
        The parsed document as a dictionary.

    Raises:
        SpecParseError: If the source cannot be loaded or parsed.
    """
    if source == STDIN_SOURCE:
        return _load_from_stdin()
    elif source.startswith(("http://", "https://")):
        return _load_from_url(source)
    else:
        return _load_from_file(source)


def _load_from_stdin() -> dict[str, Any]:
    """Read the whole of stdin and parse it as JSON, then YAML."""
    try:
        content = sys.stdin.read()
    except Exception as exc:
        raise SpecParseError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise SpecParseError(
            "No input received from stdin (pipe an OpenAPI document, "
            "e.g. `cat openapi.yaml | apium`)"
        )

    return _parse_content(content, hint="stdin")


def _load_from_url(url: str) -> dict[str, Any]:
    """Fetch a document over HTTP(S). Supports JSON and YAML responses.

    Raises:
        SpecParseError: If the URL cannot be fetched or content cannot be parsed.
    """
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecParseError(
            f"HTTP {exc.response.status_code} fetching spec from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SpecParseError(f"Failed to fetch spec from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return _parse_content(response.text, hint=hint)


def _load_from_file(path: str) -> dict[str, Any]:
    """Load a document from a local file.

    The ``.json``, ``.yaml`` and ``.yml`` extensions select the parser; any
    other extension falls back to content-based detection.

    Raises:
        SpecParseError: If the file cannot be read or content cannot be parsed.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecParseError(f"Spec file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecParseError(f"Failed to read spec file {path}: {exc}") from exc

    if not content.strip():
        raise SpecParseError(f"Spec file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hint is 'yaml'), then falls back to YAML.
    Valid JSON is also valid YAML, but JSON parsing is stricter and faster.

    Args:
        content: The raw string content.
        hint: Optional format hint ('json' or 'yaml').

    Returns:
        The parsed dictionary.

    Raises:
        SpecParseError: If the content cannot be parsed as either format.
    """
    json_error: Exception | None = None
    yaml_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                raise SpecParseError(f"Invalid JSON: {exc}") from exc
        else:
            return _ensure_mapping(result)

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        yaml_error = exc
    else:
        return _ensure_mapping(result)

    msg = "Failed to parse spec as JSON or YAML"
    if json_error:
        msg += f"\n  JSON error: {json_error}"
    if yaml_error:
        msg += f"\n  YAML error: {yaml_error}"
    raise SpecParseError(msg)


def _ensure_mapping(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        got = type(result).__name__ if result is not None else "empty document"
        raise SpecParseError(f"Spec must be a JSON/YAML object (got {got})")
    return result


def validate_openapi_version(spec: dict[str, Any]) -> str:
    """Validate and return the OpenAPI version string.

    Accepts any 3.x version. Raises for Swagger 2.x, a missing version field,
    or other major versions.

    Args:
        spec: The parsed document.

    Returns:
        The OpenAPI version string (e.g., ``'3.0.3'``, ``'3.1.0'``).

    Raises:
        SpecParseError: If the version is missing, unsupported, or indicates
            Swagger 2.x.
    """
    if "swagger" in spec:
        swagger_ver = str(spec["swagger"])
        raise SpecParseError(
            f"Swagger {swagger_ver} is not supported. "
            "Only OpenAPI 3.x documents can be browsed. "
            "Consider converting with https://converter.swagger.io"
        )

    openapi_version = spec.get("openapi")
    if openapi_version is None:
        raise SpecParseError(
            "Missing 'openapi' field. Is this an OpenAPI 3.x document?"
        )

    version_str = str(openapi_version)
    if version_str.startswith("3."):
        return version_str

    raise SpecParseError(
        f"Unsupported OpenAPI version: {version_str}. "
        "Only OpenAPI 3.x is supported."
    )
