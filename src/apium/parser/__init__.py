"""OpenAPI document parser -- load, flatten, and resolve ``$ref`` pointers.

This sub-package turns a raw OpenAPI 3.x document (JSON or YAML, from stdin,
a local file, or a URL) into the flat records the browser consumes.

Typical usage::

    from apium.parser import load_spec, validate_openapi_version, flatten_endpoints

    raw = load_spec("-")
    validate_openapi_version(raw)
    endpoints = flatten_endpoints(raw)

Sub-modules:

* :mod:`~apium.parser.loader` -- I/O layer (URL, file, stdin) plus format
  detection and OpenAPI version validation.
* :mod:`~apium.parser.resolver` -- One-level ``$ref`` lookups and schema
  type/enum labels.
* :mod:`~apium.parser.flattener` -- Walks the document and produces
  :class:`~apium.models.Endpoint` and :class:`~apium.models.Schema` records.
"""

from apium.parser.flattener import extract_info, flatten_endpoints, flatten_schemas
from apium.parser.loader import load_spec, validate_openapi_version
from apium.parser.resolver import resolve_schema

__all__ = [
    "load_spec",
    "validate_openapi_version",
    "flatten_endpoints",
    "flatten_schemas",
    "extract_info",
    "resolve_schema",
]
