"""Tests for apium.tui.navigator."""

from __future__ import annotations

from typing import Any

import pytest

from apium.models import (
    APIInfo,
    DetailView,
    Endpoint,
    FilterField,
    HTTPMethod,
    ListView,
    ParameterLocation,
    ViewMode,
)
from apium.tui.keys import Key
from apium.tui.navigator import (
    DETAIL_FOOTER,
    Navigator,
    build_filters,
    code_class,
)


@pytest.fixture
def navigator(
    petstore_endpoints: list[Endpoint], petstore_raw: dict[str, Any]
) -> Navigator:
    return Navigator(
        petstore_endpoints,
        document=petstore_raw,
        info=APIInfo(title="Petstore API", version="1.0.0"),
    )


def _paths(view: ListView) -> list[str]:
    return [f"{row.method.value} {row.path}" for row in view.endpoints]


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------


class TestBuildFilters:
    def test_methods_sorted_with_all_first(
        self, petstore_endpoints: list[Endpoint]
    ) -> None:
        assert build_filters(petstore_endpoints) == ["All", "DELETE", "GET", "POST"]

    def test_tags_in_first_seen_order(self, petstore_endpoints: list[Endpoint]) -> None:
        filters = build_filters(petstore_endpoints, FilterField.TAG)
        assert filters == ["All", "pets", "Untagged", "ops"]

    def test_without_all(self, petstore_endpoints: list[Endpoint]) -> None:
        assert build_filters(petstore_endpoints, include_all=False) == [
            "DELETE",
            "GET",
            "POST",
        ]

    def test_no_endpoints(self) -> None:
        assert build_filters([]) == ["All"]
        assert build_filters([], include_all=False) == []

    def test_tag_named_all_is_not_duplicated(self) -> None:
        endpoints = [Endpoint(method=HTTPMethod.GET, path="/", tags=["All", "x"])]
        assert build_filters(endpoints, FilterField.TAG) == ["All", "x"]


class TestCodeClass:
    @pytest.mark.parametrize(
        "code,expected",
        [("200", "2xx"), ("301", "3xx"), ("404", "4xx"), ("503", "5xx"), ("default", "other"), ("1XX", "other")],
    )
    def test_classes(self, code: str, expected: str) -> None:
        assert code_class(code) == expected


# ---------------------------------------------------------------------------
# List navigation
# ---------------------------------------------------------------------------


class TestListNavigation:
    def test_initial_state(self, navigator: Navigator) -> None:
        view = navigator.render()
        assert isinstance(view, ListView)
        assert view.title == "Petstore API 1.0.0"
        assert view.active_filter == 0
        assert view.selected_index == 0
        assert len(view.endpoints) == 5
        assert "METHODS" in view.footer.upper()

    def test_right_selects_next_filter(self, navigator: Navigator) -> None:
        view = navigator.handle(Key.RIGHT)
        assert navigator.active_filter == "DELETE"
        assert _paths(view) == ["DELETE /pets/{petId}"]

    def test_left_wraps_to_last_filter(self, navigator: Navigator) -> None:
        view = navigator.handle(Key.LEFT)
        assert navigator.active_filter == "POST"
        assert _paths(view) == ["POST /pets"]

    def test_right_n_times_is_identity(self, navigator: Navigator) -> None:
        start = navigator.filter_index
        for _ in range(len(navigator.filters)):
            navigator.handle(Key.RIGHT)
        assert navigator.filter_index == start

    def test_filter_change_resets_selection(self, navigator: Navigator) -> None:
        navigator.handle(Key.DOWN)
        navigator.handle(Key.DOWN)
        assert navigator.selected_index == 2
        navigator.handle(Key.RIGHT)
        assert navigator.selected_index == 0

    def test_down_wraps(self, navigator: Navigator) -> None:
        for _ in range(5):
            navigator.handle(Key.DOWN)
        assert navigator.selected_index == 0

    def test_up_wraps_to_last(self, navigator: Navigator) -> None:
        view = navigator.handle(Key.UP)
        assert view.selected_index == 4

    def test_filters_partition_endpoints(
        self, navigator: Navigator, petstore_endpoints: list[Endpoint]
    ) -> None:
        seen: list[Endpoint] = []
        for _ in range(len(navigator.filters)):
            navigator.handle(Key.RIGHT)
            if navigator.active_filter != "All":
                seen.extend(navigator.visible_endpoints())
        assert sorted(seen, key=petstore_endpoints.index) == petstore_endpoints

    def test_visible_keeps_document_order(self, navigator: Navigator) -> None:
        navigator.handle(Key.LEFT)
        navigator.handle(Key.LEFT)
        assert navigator.active_filter == "GET"
        assert _paths(navigator.render()) == [
            "GET /pets",
            "GET /pets/{petId}",
            "GET /health",
        ]

    def test_other_key_is_noop_in_list(self, navigator: Navigator) -> None:
        navigator.handle(Key.DOWN)
        view = navigator.handle(Key.OTHER)
        assert isinstance(view, ListView)
        assert view.selected_index == 1

    def test_selection_stays_in_range(self, navigator: Navigator) -> None:
        keys = [Key.DOWN, Key.RIGHT, Key.UP, Key.UP, Key.LEFT, Key.DOWN, Key.RIGHT, Key.RIGHT]
        for key in keys:
            navigator.handle(key)
            visible = navigator.visible_endpoints()
            assert 0 <= navigator.selected_index < max(1, len(visible))


class TestEmptyFilters:
    def test_no_tabs_and_no_endpoints(self) -> None:
        navigator = Navigator([], include_all=False)
        assert navigator.filters == []
        assert navigator.active_filter is None
        for key in (Key.RIGHT, Key.LEFT, Key.DOWN, Key.UP, Key.ENTER):
            view = navigator.handle(key)
            assert isinstance(view, ListView)
            assert navigator.filter_index == 0
            assert navigator.selected_index == 0
        assert navigator.mode == ViewMode.LIST

    def test_enter_with_empty_all_tab(self) -> None:
        navigator = Navigator([])
        view = navigator.handle(Key.ENTER)
        assert isinstance(view, ListView)
        assert view.endpoints == []
        assert navigator.detail_endpoint is None


class TestTagMode:
    def test_untagged_tab(
        self, petstore_endpoints: list[Endpoint], petstore_raw: dict[str, Any]
    ) -> None:
        navigator = Navigator(
            petstore_endpoints, document=petstore_raw, filter_by=FilterField.TAG
        )
        navigator.handle(Key.RIGHT)
        view = navigator.handle(Key.RIGHT)
        assert navigator.active_filter == "Untagged"
        assert _paths(view) == ["DELETE /pets/{petId}"]
        assert "TAGS" in view.footer.upper()

    def test_tag_tab_order(
        self, petstore_endpoints: list[Endpoint], petstore_raw: dict[str, Any]
    ) -> None:
        navigator = Navigator(
            petstore_endpoints, document=petstore_raw, filter_by=FilterField.TAG
        )
        view = navigator.handle(Key.RIGHT)
        assert navigator.active_filter == "pets"
        assert _paths(view) == ["GET /pets", "POST /pets", "GET /pets/{petId}"]

    def test_real_tag_named_all_filters(self) -> None:
        endpoints = [
            Endpoint(method=HTTPMethod.GET, path="/a", tags=["All"]),
            Endpoint(method=HTTPMethod.GET, path="/b", tags=["pets"]),
        ]
        navigator = Navigator(endpoints, filter_by=FilterField.TAG, include_all=False)
        assert navigator.filters == ["All", "pets"]
        assert [e.path for e in navigator.visible_endpoints()] == ["/a"]
        navigator.handle(Key.RIGHT)
        assert [e.path for e in navigator.visible_endpoints()] == ["/b"]

    def test_prepended_all_tab_shows_everything(self) -> None:
        endpoints = [
            Endpoint(method=HTTPMethod.GET, path="/a", tags=["All"]),
            Endpoint(method=HTTPMethod.GET, path="/b", tags=["pets"]),
        ]
        navigator = Navigator(endpoints, filter_by=FilterField.TAG)
        assert navigator.filters == ["All", "pets"]
        assert [e.path for e in navigator.visible_endpoints()] == ["/a", "/b"]


# ---------------------------------------------------------------------------
# Detail view
# ---------------------------------------------------------------------------


class TestDetailView:
    def test_enter_opens_selected_endpoint(self, navigator: Navigator) -> None:
        view = navigator.handle(Key.ENTER)
        assert isinstance(view, DetailView)
        assert navigator.mode == ViewMode.DETAIL
        assert view.method == HTTPMethod.GET
        assert view.path == "/pets"
        assert view.description == "Returns every pet in the store"
        assert view.tags == ["pets"]
        assert view.footer == DETAIL_FOOTER

    def test_parameter_labels_are_resolved(self, navigator: Navigator) -> None:
        view = navigator.handle(Key.ENTER)
        rows = {row.name: row for row in view.parameters}
        assert list(rows) == ["X-Request-Id", "limit", "color"]
        assert rows["X-Request-Id"].location == ParameterLocation.HEADER
        assert rows["limit"].type_label == "integer"
        assert rows["limit"].enum_values is None
        assert rows["color"].type_label == "string"
        assert rows["color"].enum_values == ["red", "blue"]
        assert rows["color"].required is True

    def test_response_rows(self, navigator: Navigator) -> None:
        view = navigator.handle(Key.ENTER)
        assert [(r.code, r.code_class, r.description) for r in view.responses] == [
            ("200", "2xx", "A list of pets"),
            ("default", "other", "Unexpected error"),
        ]

    def test_summary_used_when_no_description(self, navigator: Navigator) -> None:
        navigator.handle(Key.DOWN)
        view = navigator.handle(Key.ENTER)
        assert view.path == "/pets"
        assert view.method == HTTPMethod.POST
        assert view.description == "Create a pet"

    def test_deprecated_flag(self, navigator: Navigator) -> None:
        navigator.handle(Key.RIGHT)
        view = navigator.handle(Key.ENTER)
        assert view.deprecated is True
        assert view.tags == ["Untagged"]

    @pytest.mark.parametrize("key", [Key.LEFT, Key.RIGHT, Key.UP, Key.DOWN, Key.ENTER, Key.OTHER])
    def test_any_key_returns_with_state_preserved(
        self, navigator: Navigator, key: Key
    ) -> None:
        navigator.handle(Key.LEFT)
        navigator.handle(Key.LEFT)
        navigator.handle(Key.DOWN)
        navigator.handle(Key.ENTER)
        assert navigator.mode == ViewMode.DETAIL

        view = navigator.handle(key)
        assert isinstance(view, ListView)
        assert navigator.mode == ViewMode.LIST
        assert navigator.active_filter == "GET"
        assert view.selected_index == 1
        assert navigator.detail_endpoint is None


class TestQuit:
    @pytest.mark.parametrize("key", [Key.QUIT, Key.INTERRUPT])
    def test_quit_from_list(self, navigator: Navigator, key: Key) -> None:
        assert navigator.handle(key) is None

    @pytest.mark.parametrize("key", [Key.QUIT, Key.INTERRUPT])
    def test_quit_from_detail(self, navigator: Navigator, key: Key) -> None:
        navigator.handle(Key.ENTER)
        assert navigator.handle(key) is None
