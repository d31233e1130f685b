"""Canonical Pydantic models shared across all apium modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Configuration models** -- read from the user's config directory:
    :class:`FilterField` and :class:`ViewerConfig`.

**Flattener output models** -- produced once from the OpenAPI document and
never mutated afterwards:
    :class:`HTTPMethod`, :class:`ParameterLocation`, :class:`Parameter`,
    :class:`Response`, :class:`Schema`, :class:`Endpoint`, :class:`APIInfo`,
    and :class:`SchemaLabel`.

**Render models** -- plain descriptions of one screen, returned by the
navigator and drawn by the renderer:
    :class:`ViewMode`, :class:`EndpointRow`, :class:`ParameterRow`,
    :class:`ResponseRow`, :class:`ListView`, and :class:`DetailView`.

Flattener and render models are frozen; the document is read once and is
immutable for the whole session.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

UNTAGGED = "Untagged"
"""Tag assigned to operations that declare no tags."""

ALL_FILTER = "All"
"""Synthetic filter entry meaning "no filter"."""


# --- Config ---


class FilterField(str, enum.Enum):
    """Endpoint attribute the filter tabs are built from."""

    METHOD = "method"
    TAG = "tag"


class ViewerConfig(BaseModel):
    """User-wide viewer configuration persisted at ``~/.config/apium/config.json``.

    Loaded by :func:`~apium.config.load_user_config`. Fields here have the
    lowest precedence and can be overridden by environment variables or CLI
    flags. See :func:`~apium.config.resolve_config` for the full chain.
    """

    filter_by: FilterField = Field(
        default=FilterField.METHOD,
        description="Build filter tabs from HTTP methods or from tags",
    )
    include_all: bool = Field(
        default=True, description="Prepend a synthetic 'All' filter tab"
    )
    no_color: bool = Field(default=False, description="Disable colour output")


# --- Flattener Output Models ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised by OpenAPI 3.x path-item objects.

    Values are upper-case so that an :class:`Endpoint` compares equal to the
    plain verb string (``endpoint.method == "GET"``).
    """

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"


class ParameterLocation(str, enum.Enum):
    """Locations where an API parameter can appear, per OpenAPI ``in`` field."""

    QUERY = "query"
    HEADER = "header"
    PATH = "path"
    COOKIE = "cookie"


class Parameter(BaseModel):
    """A single parameter of an operation.

    The schema is carried exactly as declared -- either an inline type
    descriptor or a ``{"$ref": "#/components/schemas/<Name>"}`` pointer.
    Resolution into a display label happens at render time through
    :func:`~apium.parser.resolver.resolve_schema`.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    location: ParameterLocation = Field(alias="in")
    required: bool = False
    description: Optional[str] = None
    schema_: dict[str, Any] = Field(default_factory=dict, alias="schema")


class Response(BaseModel):
    """Response metadata for a single declared status code."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    code: str
    description: str = ""
    schema_: dict[str, Any] = Field(default_factory=dict, alias="schema")


class Schema(BaseModel):
    """A named entry of ``components/schemas``, kept unresolved."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    schema_: Any = Field(default=None, alias="schema")


class Endpoint(BaseModel):
    """One HTTP operation (a URL path + HTTP method pair)."""

    model_config = ConfigDict(frozen=True)

    method: HTTPMethod
    path: str
    summary: str = ""
    description: str = ""
    operation_id: Optional[str] = None
    deprecated: bool = False
    parameters: list[Parameter] = Field(default_factory=list)
    responses: list[Response] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=lambda: [UNTAGGED])


class APIInfo(BaseModel):
    """API metadata taken from the document's *Info Object*."""

    model_config = ConfigDict(frozen=True)

    title: str = "OpenAPI"
    version: str = ""
    description: Optional[str] = None

    @property
    def heading(self) -> str:
        """Title and version joined for the header line."""
        return f"{self.title} {self.version}".strip()


class SchemaLabel(BaseModel):
    """Display form of a parameter schema: a type label and optional enum."""

    model_config = ConfigDict(frozen=True)

    type: str
    enum: Optional[list[Any]] = None


# --- Render Models ---


class ViewMode(str, enum.Enum):
    """Which screen the navigator is showing."""

    LIST = "list"
    DETAIL = "detail"


class EndpointRow(BaseModel):
    model_config = ConfigDict(frozen=True)

    method: HTTPMethod
    path: str
    summary: str = ""
    deprecated: bool = False


class ParameterRow(BaseModel):
    model_config = ConfigDict(frozen=True)

    location: ParameterLocation
    name: str
    type_label: str
    required: bool = False
    description: Optional[str] = None
    enum_values: Optional[list[Any]] = None


class ResponseRow(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    code_class: str = Field(description="2xx, 3xx, 4xx, 5xx or other")
    description: str = ""


class ListView(BaseModel):
    """The endpoint list screen."""

    model_config = ConfigDict(frozen=True)

    title: str
    filters: list[str] = Field(default_factory=list)
    active_filter: int = 0
    endpoints: list[EndpointRow] = Field(default_factory=list)
    selected_index: int = 0
    footer: str = ""


class DetailView(BaseModel):
    """The single-endpoint detail screen."""

    model_config = ConfigDict(frozen=True)

    title: str
    method: HTTPMethod
    path: str
    description: str = ""
    deprecated: bool = False
    tags: list[str] = Field(default_factory=list)
    parameters: list[ParameterRow] = Field(default_factory=list)
    responses: list[ResponseRow] = Field(default_factory=list)
    footer: str = ""
