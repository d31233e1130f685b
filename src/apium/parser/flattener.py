"""Flatten an OpenAPI document into endpoint, schema, and info records.

This module walks a raw (unresolved) OpenAPI document and produces the flat
records the browser works with:

* :func:`flatten_endpoints` -- one :class:`~apium.models.Endpoint` per
  path + HTTP method pair, in declaration order.
* :func:`flatten_schemas` -- one :class:`~apium.models.Schema` per entry of
  ``components/schemas``, in declaration order.
* :func:`extract_info` -- the ``info`` object (title, version, description).

Path-level parameters are listed before operation-level ones and are not
de-duplicated against them.  Parameter schemas are carried unmodified;
turning a ``$ref`` into a display label is deferred to
:func:`~apium.parser.resolver.resolve_schema`.

Malformed entries are skipped rather than failing the whole document: a
path item or operation that is not a mapping, a key under a path item that is
not an HTTP method, and a parameter without a name, with an unknown ``in``
location, or pointing at a missing ``components/parameters`` entry.  Each
skip is reported through :func:`~apium.output.debug`.
"""

from __future__ import annotations

from typing import Any, Optional

from apium.models import (
    UNTAGGED,
    APIInfo,
    Endpoint,
    HTTPMethod,
    Parameter,
    ParameterLocation,
    Response,
    Schema,
)
from apium.output import debug
from apium.parser.resolver import (
    PARAMETER_REF_PREFIX,
    RESPONSE_REF_PREFIX,
    resolve_ref,
)

# Path-item keys that name operations, lower-case as they appear in documents
_HTTP_METHODS = frozenset(m.value.lower() for m in HTTPMethod)
_LOCATIONS = frozenset(loc.value for loc in ParameterLocation)

_JSON_CONTENT_TYPE = "application/json"


def flatten_endpoints(document: dict[str, Any]) -> list[Endpoint]:
    """Extract every operation of *document* as an :class:`~apium.models.Endpoint`.

    Iterates ``paths`` and each path item's keys in declaration order, so the
    output is never re-sorted.  For each operation:

    * the method is upper-cased;
    * path-level parameters come first, then operation-level parameters;
    * each response is resolved through ``components/responses`` when it is
      a reference, and its JSON body schema is extracted (``{}`` if absent);
    * tags default to ``["Untagged"]``.

    Args:
        document: The raw OpenAPI document.

    Returns:
        The endpoints, one per path + HTTP method pair.
    """
    paths = document.get("paths")
    if not isinstance(paths, dict):
        if paths is not None:
            debug("Ignoring 'paths': not a mapping")
        return []

    endpoints: list[Endpoint] = []

    for path, path_item in paths.items():
        if not isinstance(path_item, dict):
            debug(f"Skipping path {path}: path item is not a mapping")
            continue

        path_params = _as_list(path_item.get("parameters"))

        for key, operation in path_item.items():
            if str(key).lower() not in _HTTP_METHODS:
                continue
            if not isinstance(operation, dict):
                debug(f"Skipping {str(key).upper()} {path}: operation is not a mapping")
                continue

            op_params = _as_list(operation.get("parameters"))

            endpoints.append(
                Endpoint(
                    method=HTTPMethod(str(key).upper()),
                    path=str(path),
                    summary=operation.get("summary") or "",
                    description=operation.get("description") or "",
                    operation_id=operation.get("operationId"),
                    deprecated=bool(operation.get("deprecated", False)),
                    parameters=_extract_parameters(document, path_params + op_params),
                    responses=_extract_responses(document, operation.get("responses")),
                    tags=_extract_tags(operation.get("tags")),
                )
            )

    return endpoints


def flatten_schemas(document: dict[str, Any]) -> list[Schema]:
    """Wrap each ``components/schemas`` entry as a :class:`~apium.models.Schema`.

    Internal ``$ref`` pointers inside the schemas are left as they are.
    """
    components = document.get("components")
    if not isinstance(components, dict):
        return []
    schemas = components.get("schemas")
    if not isinstance(schemas, dict):
        return []
    return [Schema(name=str(name), schema=schema) for name, schema in schemas.items()]


def extract_info(document: dict[str, Any]) -> APIInfo:
    """Read the title, version, and description from the ``info`` object."""
    info = document.get("info")
    if not isinstance(info, dict):
        return APIInfo()
    version = info.get("version")
    return APIInfo(
        title=str(info.get("title") or "OpenAPI"),
        version=str(version) if version is not None else "",
        description=info.get("description"),
    )


def _as_list(value: Any) -> list[Any]:
    return list(value) if isinstance(value, list) else []


def _extract_tags(tags: Any) -> list[str]:
    if isinstance(tags, list) and tags:
        return [str(tag) for tag in tags]
    return [UNTAGGED]


def _extract_parameters(
    document: dict[str, Any], params_list: list[Any]
) -> list[Parameter]:
    """Convert raw parameter objects into :class:`~apium.models.Parameter` records.

    A parameter that is itself a ``$ref`` into ``components/parameters`` is
    replaced by its target.  The schema is kept exactly as declared.
    """
    parameters: list[Parameter] = []

    for param in params_list:
        if isinstance(param, dict) and "$ref" in param:
            ref = param["$ref"]
            target = resolve_ref(document, ref)
            if not isinstance(target, dict) or not str(ref).startswith(
                PARAMETER_REF_PREFIX
            ):
                debug(f"Skipping parameter: cannot resolve $ref {ref!r}")
                continue
            param = target

        if not isinstance(param, dict):
            debug("Skipping parameter: not a mapping")
            continue

        name = param.get("name")
        location = param.get("in")
        if not name:
            debug("Skipping parameter without a name")
            continue
        if location not in _LOCATIONS:
            debug(f"Skipping parameter {name!r}: unknown location {location!r}")
            continue

        schema = param.get("schema")
        parameters.append(
            Parameter(
                name=str(name),
                location=ParameterLocation(location),
                required=bool(param.get("required", False)),
                description=param.get("description"),
                schema=schema if isinstance(schema, dict) else {},
            )
        )

    return parameters


def _extract_responses(document: dict[str, Any], responses: Any) -> list[Response]:
    """Extract one :class:`~apium.models.Response` per declared status code.

    When a response is a ``$ref`` into ``components/responses``, the
    referenced description wins if it has one; otherwise the response's own
    description is used.
    """
    if not isinstance(responses, dict):
        return []

    result: list[Response] = []

    for code, response in responses.items():
        if not isinstance(response, dict):
            debug(f"Skipping response {code}: not a mapping")
            continue

        resolved = response
        description = response.get("description")
        ref = response.get("$ref")
        if isinstance(ref, str) and ref.startswith(RESPONSE_REF_PREFIX):
            target = resolve_ref(document, ref)
            if isinstance(target, dict):
                resolved = target
                description = target.get("description") or description
            else:
                debug(f"Response {code}: cannot resolve $ref {ref!r}")

        result.append(
            Response(
                code=str(code),
                description=description or "",
                schema=_json_schema(resolved.get("content")),
            )
        )

    return result


def _json_schema(content: Any) -> dict[str, Any]:
    """Return the JSON body schema from a ``content`` map, or ``{}``.

    ``application/json`` is preferred; any other JSON media type
    (``application/problem+json``, ``application/json; charset=utf-8``) is
    accepted as a fallback.
    """
    if not isinstance(content, dict):
        return {}

    media: Optional[Any] = content.get(_JSON_CONTENT_TYPE)
    if media is None:
        for content_type, candidate in content.items():
            if "json" in str(content_type).lower():
                media = candidate
                break

    if isinstance(media, dict) and isinstance(media.get("schema"), dict):
        return media["schema"]
    return {}
