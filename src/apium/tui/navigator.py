"""Navigation state machine for the endpoint browser.

:class:`Navigator` owns the three pieces of session state -- the active
filter tab, the selected endpoint, and the view mode -- and advances them one
:class:`~apium.tui.keys.Key` at a time.  Every transition returns a render
model (:class:`~apium.models.ListView` or :class:`~apium.models.DetailView`)
or ``None`` when the session should end, so the whole state machine can be
driven headlessly in tests.

Transitions in the list view::

    LEFT / RIGHT   move the filter tab (wrapping), reset the selection
    UP / DOWN      move the selection within the visible endpoints (wrapping)
    ENTER          open the detail view for the selected endpoint
    QUIT           end the session

In the detail view QUIT still ends the session and any other key returns to
the list with filter and selection unchanged.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence, Union

from apium.models import (
    ALL_FILTER,
    APIInfo,
    DetailView,
    Endpoint,
    EndpointRow,
    FilterField,
    ListView,
    ParameterRow,
    ResponseRow,
    ViewMode,
)
from apium.parser.resolver import resolve_schema
from apium.tui.keys import Key, is_exit_key

View = Union[ListView, DetailView]

LIST_FOOTER = " ← → to switch {noun} • ↑ ↓ to navigate • Enter for details • q to quit "
DETAIL_FOOTER = " Press any key to return... "


def build_filters(
    endpoints: Sequence[Endpoint],
    filter_by: FilterField = FilterField.METHOD,
    include_all: bool = True,
) -> list[str]:
    """Return the filter tab labels for *endpoints*.

    Methods are de-duplicated and sorted alphabetically; tags keep the order
    in which they are first seen.  With *include_all* the synthetic ``"All"``
    tab comes first.
    """
    if filter_by == FilterField.METHOD:
        values = sorted({e.method.value for e in endpoints})
    else:
        values = []
        for endpoint in endpoints:
            for tag in endpoint.tags:
                if tag not in values:
                    values.append(tag)

    if include_all:
        return [ALL_FILTER] + [v for v in values if v != ALL_FILTER]
    return values


def code_class(code: str) -> str:
    """Classify a status code as ``2xx``..``5xx``, or ``other`` (e.g. ``default``)."""
    if code[:1] in ("2", "3", "4", "5"):
        return f"{code[0]}xx"
    return "other"


class Navigator:
    """Browser state over a fixed list of endpoints.

    Args:
        endpoints: Flattened endpoints, in document order.
        document: The raw OpenAPI document, used to resolve parameter
            schema references for the detail view.
        info: API metadata for the title line.
        filter_by: Build tabs from HTTP methods or from tags.
        include_all: Prepend the ``"All"`` tab.
    """

    def __init__(
        self,
        endpoints: Sequence[Endpoint],
        document: Optional[dict[str, Any]] = None,
        info: Optional[APIInfo] = None,
        filter_by: FilterField = FilterField.METHOD,
        include_all: bool = True,
    ) -> None:
        self._endpoints = list(endpoints)
        self._document = document or {}
        self._info = info or APIInfo()
        self._filter_by = filter_by
        self._include_all = include_all
        self.filters = build_filters(self._endpoints, filter_by, include_all)
        self.filter_index = 0
        self.selected_index = 0
        self.mode = ViewMode.LIST
        self._detail: Optional[Endpoint] = None

    @property
    def active_filter(self) -> Optional[str]:
        """Label of the active tab, or ``None`` when there are no tabs."""
        if not self.filters:
            return None
        return self.filters[self.filter_index]

    @property
    def detail_endpoint(self) -> Optional[Endpoint]:
        """The endpoint shown in the detail view, if open."""
        return self._detail

    def _matches(self, endpoint: Endpoint, active: Optional[str]) -> bool:
        # Only the prepended tab means "no filter"; a real tag may be named All
        if active is None or (self._include_all and self.filter_index == 0):
            return True
        if self._filter_by == FilterField.METHOD:
            return endpoint.method.value == active
        return active in endpoint.tags

    def visible_endpoints(self) -> list[Endpoint]:
        """Endpoints passing the active filter, recomputed on every call."""
        active = self.active_filter
        return [e for e in self._endpoints if self._matches(e, active)]

    # ------------------------------------------------------------------ #
    # Transitions
    # ------------------------------------------------------------------ #

    def handle(self, key: Key) -> Optional[View]:
        """Apply one key event and return the view to draw.

        Returns:
            The render model for the new state, or ``None`` when *key* ends
            the session.
        """
        if is_exit_key(key):
            return None

        if self.mode == ViewMode.DETAIL:
            self.mode = ViewMode.LIST
            self._detail = None
            return self.render()

        if key == Key.LEFT:
            self._move_filter(-1)
        elif key == Key.RIGHT:
            self._move_filter(1)
        elif key == Key.UP:
            self._move_selection(-1)
        elif key == Key.DOWN:
            self._move_selection(1)
        elif key == Key.ENTER:
            visible = self.visible_endpoints()
            if visible:
                self._detail = visible[self.selected_index]
                self.mode = ViewMode.DETAIL

        return self.render()

    def _move_filter(self, step: int) -> None:
        count = len(self.filters)
        if count:
            self.filter_index = (self.filter_index + step + count) % count
        self.selected_index = 0

    def _move_selection(self, step: int) -> None:
        count = len(self.visible_endpoints())
        if count == 0:
            self.selected_index = 0
            return
        self.selected_index = (self.selected_index + step + count) % count

    # ------------------------------------------------------------------ #
    # Render models
    # ------------------------------------------------------------------ #

    def render(self) -> View:
        """Return the render model for the current state."""
        if self.mode == ViewMode.DETAIL and self._detail is not None:
            return self._detail_view(self._detail)
        return self._list_view()

    def _list_view(self) -> ListView:
        noun = "methods" if self._filter_by == FilterField.METHOD else "tags"
        return ListView(
            title=self._info.heading,
            filters=self.filters,
            active_filter=self.filter_index,
            endpoints=[
                EndpointRow(
                    method=e.method,
                    path=e.path,
                    summary=e.summary,
                    deprecated=e.deprecated,
                )
                for e in self.visible_endpoints()
            ],
            selected_index=self.selected_index,
            footer=LIST_FOOTER.format(noun=noun),
        )

    def _detail_view(self, endpoint: Endpoint) -> DetailView:
        parameters = []
        for param in endpoint.parameters:
            label = resolve_schema(self._document, param.schema_)
            parameters.append(
                ParameterRow(
                    location=param.location,
                    name=param.name,
                    type_label=label.type,
                    required=param.required,
                    description=param.description,
                    enum_values=label.enum,
                )
            )

        return DetailView(
            title=self._info.heading,
            method=endpoint.method,
            path=endpoint.path,
            description=endpoint.description or endpoint.summary,
            deprecated=endpoint.deprecated,
            tags=endpoint.tags,
            parameters=parameters,
            responses=[
                ResponseRow(
                    code=r.code,
                    code_class=code_class(r.code),
                    description=r.description,
                )
                for r in endpoint.responses
            ],
            footer=DETAIL_FOOTER,
        )
