"""Draw render models as Rich :class:`~rich.text.Text` lines.

:func:`render_view` is the single entry point: it takes a
:class:`~apium.models.ListView` or :class:`~apium.models.DetailView` plus the
terminal size and returns one ``Text`` per screen line.  Nothing here touches
the terminal; :class:`~apium.tui.terminal.TTYTerminal` prints the lines.

List screen layout (top to bottom): rule, centred title, blank line, filter
tabs, rule, endpoint rows, padding, footer.  The footer stays on the last
line; when the endpoint list is taller than the screen it scrolls to keep the
selection visible.  The detail screen keeps its title block and footer and
clips the body in between.
"""

from __future__ import annotations

from typing import Optional, Union

from rich.text import Text

from apium.models import DetailView, HTTPMethod, ListView

METHOD_STYLES: dict[str, str] = {
    HTTPMethod.GET.value: "bold green",
    HTTPMethod.POST.value: "bold blue",
    HTTPMethod.PUT.value: "bold yellow",
    HTTPMethod.DELETE.value: "bold red",
    HTTPMethod.PATCH.value: "bold magenta",
}

CODE_STYLES: dict[str, str] = {
    "2xx": "bold green",
    "3xx": "bold cyan",
    "4xx": "bold yellow",
    "5xx": "bold red",
}

SELECTED_STYLE = "bold on bright_black"
BADGE_STYLE = "bold on magenta"
ENUM_BADGE_STYLE = "bold on bright_black"

# rule, title, blank, tabs, rule above the list; footer below it
_LIST_CHROME = 6
# rule, title, blank, rule above the detail body
_DETAIL_HEAD = 4


def method_text(method: str) -> Text:
    """Return *method* styled with its colour (unknown methods stay plain)."""
    return Text(method, style=METHOD_STYLES.get(method.upper(), ""))


def rule(width: int) -> Text:
    if width <= 2:
        return Text("─")
    return Text("+" + "-" * (width - 2) + "+")


def title_line(title: str, width: int) -> Text:
    padding = max(0, (width - len(title)) // 2)
    return Text(" " * padding + title, style="bold")


def footer_line(text: str) -> Text:
    return Text(text.upper(), style="bold white")


def _tab(label: str, active: bool) -> Text:
    if not active:
        return Text(f" {label} ", style="bold")
    if label.upper() in METHOD_STYLES:
        inner = method_text(label)
    else:
        inner = Text(label, style="bold magenta")
    return Text.assemble("[", inner, "]")


def _scroll_start(count: int, selected: int, capacity: int) -> int:
    """First row to show so that *selected* is within a window of *capacity*."""
    if capacity <= 0 or count <= capacity:
        return 0
    return min(max(0, selected - capacity + 1), count - capacity)


def render_list(view: ListView, width: int, height: int) -> list[Text]:
    lines = [rule(width), title_line(view.title, width), Text("")]
    lines.append(
        Text(" ").join(
            _tab(label, i == view.active_filter) for i, label in enumerate(view.filters)
        )
    )
    lines.append(rule(width))

    capacity = max(1, height - _LIST_CHROME)
    start = _scroll_start(len(view.endpoints), view.selected_index, capacity)
    for i, row in enumerate(view.endpoints[start : start + capacity], start=start):
        selected = i == view.selected_index
        line = Text("→" if selected else " ")
        line.append_text(method_text(row.method.value))
        line.append(f" {row.path}  ", style="strike" if row.deprecated else "")
        if row.summary:
            line.append(row.summary, style="dim")
        if selected:
            line.stylize(SELECTED_STYLE)
        lines.append(line)

    if not view.endpoints:
        lines.append(Text("  No endpoints.", style="dim"))

    padding = max(0, height - len(lines) - 1)
    lines.extend(Text("") for _ in range(padding))
    lines.append(footer_line(view.footer))
    return lines


def render_detail(view: DetailView, width: int, height: Optional[int] = None) -> list[Text]:
    """Render the detail screen, clipping the body to *height* when given.

    The title block and footer always stay on screen; a clipped body ends
    with an ellipsis line.
    """
    lines = [rule(width), title_line(view.title, width), Text(""), rule(width)]

    header = method_text(view.method.value)
    header.append(f" {view.path}")
    if view.deprecated:
        header.append(" (deprecated)", style="dim")
    lines.append(header)
    lines.append(Text.assemble(("Description:", "bold"), " ", view.description))

    if view.tags:
        lines.append(Text(""))
        tags = Text.assemble(("Tags:", "bold"), " ")
        tags.append_text(
            Text(" ").join(Text(f" {tag.upper()} ", style=BADGE_STYLE) for tag in view.tags)
        )
        lines.append(tags)

    if view.parameters:
        lines.append(Text(""))
        lines.append(Text("Parameters:", style="bold"))
        for param in view.parameters:
            line = Text(f"  • [{param.location.value}] {param.name} (")
            line.append(param.type_label, style="yellow")
            line.append(") ")
            if param.required:
                line.append("(required)", style="bold red")
            lines.append(line)
            if param.description:
                lines.append(Text(f"    {param.description}", style="bold"))
            if param.enum_values:
                lines.append(Text(""))
                lines.append(Text.assemble("    ", (" ENUM ", ENUM_BADGE_STYLE)))
                for value in param.enum_values:
                    lines.append(Text(f"      • {value}", style="bold"))
                lines.append(Text(""))

    lines.append(Text(""))
    lines.append(Text("Responses:", style="bold"))
    for response in view.responses:
        line = Text("  ")
        line.append(response.code, style=CODE_STYLES.get(response.code_class, "bold"))
        line.append(f": {response.description}")
        lines.append(line)

    trailer = [rule(width), footer_line(view.footer)]
    if height is not None:
        lines = _clip_body(lines, _DETAIL_HEAD, height - len(trailer))
    return lines + trailer


def _clip_body(lines: list[Text], head: int, limit: int) -> list[Text]:
    if len(lines) <= limit:
        return lines
    room = limit - head
    if room <= 0:
        return lines[:max(0, limit)]
    return lines[: head + room - 1] + [Text("  ...", style="dim")]


def render_view(view: Union[ListView, DetailView], width: int, height: int) -> list[Text]:
    """Render either screen for a terminal of *width* x *height*."""
    if isinstance(view, DetailView):
        return render_detail(view, width, height)
    return render_list(view, width, height)
