"""Resolve ``$ref`` JSON Reference pointers for display.

apium never inlines a whole document.  The browser only needs to follow a
pointer one level deep -- a parameter whose schema is
``{"$ref": "#/components/schemas/Color"}`` is shown with ``Color``'s type and
enum values, and a response that is ``{"$ref": "#/components/responses/NotFound"}``
is shown with the referenced description.

Two public functions:

* :func:`resolve_ref` -- look up any internal JSON pointer, returning
  ``None`` for external or dangling references instead of raising.
* :func:`resolve_schema` -- turn an inline schema or a schema reference into
  a :class:`~apium.models.SchemaLabel` (type label plus enum values).
  Dangling references render as ``"unknown"``.
"""

from __future__ import annotations

from typing import Any, Optional

from apium.models import SchemaLabel

RESPONSE_REF_PREFIX = "#/components/responses/"
PARAMETER_REF_PREFIX = "#/components/parameters/"

DEFAULT_TYPE = "string"
UNKNOWN_TYPE = "unknown"


def resolve_ref(document: dict[str, Any], ref: Any) -> Optional[Any]:
    """Resolve a single internal ``$ref`` string against *document*.

    Parses JSON Pointer references like ``#/components/schemas/Pet`` and
    navigates the document to locate the referenced value.  Handles
    RFC 6901 escaping (``~0`` for ``~``, ``~1`` for ``/``).

    Args:
        document: The root OpenAPI document.
        ref: The ``$ref`` value (e.g., ``"#/components/schemas/Pet"``).

    Returns:
        The value at the referenced path, or ``None`` when the reference is
        not a string, is external (does not start with ``#/``), or any
        segment does not exist.
    """
    if not isinstance(ref, str) or not ref.startswith("#/"):
        return None

    current: Any = document
    for segment in ref[2:].split("/"):
        segment = segment.replace("~1", "/").replace("~0", "~")

        if isinstance(current, dict):
            if segment not in current:
                return None
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError):
                return None
        else:
            return None

    return current


def _type_of(schema: dict[str, Any], default: str) -> str:
    """Return the schema's type, handling OpenAPI 3.1 type arrays."""
    type_value = schema.get("type")
    if isinstance(type_value, list):
        non_null = [t for t in type_value if t != "null"]
        return str(non_null[0]) if non_null else default
    if type_value:
        return str(type_value)
    return default


def _enum_of(schema: dict[str, Any]) -> Optional[list[Any]]:
    values = schema.get("enum")
    if isinstance(values, list) and values:
        return list(values)
    return None


def resolve_schema(document: dict[str, Any], schema: Any) -> SchemaLabel:
    """Describe a parameter schema as a type label and optional enum.

    * Reference into ``components/schemas``: the target's ``type`` is the
      label; a target with ``properties`` but no ``type`` is ``"object"``;
      a missing target, or one with neither, is ``"unknown"``.
    * Inline schema: its ``type`` is the label, defaulting to ``"string"``.

    Only one level of ``$ref`` is followed.

    Args:
        document: The root OpenAPI document.
        schema: The schema as declared on the parameter (may be empty or
            ``None``).

    Returns:
        The resolved :class:`~apium.models.SchemaLabel`.
    """
    if not isinstance(schema, dict):
        return SchemaLabel(type=DEFAULT_TYPE)

    if "$ref" in schema:
        target = resolve_ref(document, schema["$ref"])
        if not isinstance(target, dict):
            return SchemaLabel(type=UNKNOWN_TYPE)
        if target.get("type"):
            label = _type_of(target, UNKNOWN_TYPE)
        elif "properties" in target:
            label = "object"
        else:
            label = UNKNOWN_TYPE
        return SchemaLabel(type=label, enum=_enum_of(target))

    return SchemaLabel(type=_type_of(schema, DEFAULT_TYPE), enum=_enum_of(schema))
