"""Rich renderers for inline math and question graphs.

These are the display collaborators of the quiz core: each is a pure
function from data to a Rich renderable and never touches a console.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from numbers import Real
from typing import Optional

from rich import box
from rich.console import RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..models import GraphKind
from ..segmenter import DEFAULT_DELIMITER, SegmentKind, segment

MATH_STYLE = "italic bright_cyan"
BAR_GLYPH = "█"
LINE_GLYPH = "●"
LINK_GLYPH = "│"
SCATTER_GLYPH = "•"

Series = Sequence[Mapping[str, object]]


def render_math(source: str) -> Text:
    """Render a math expression's source in the math style."""

    return Text(source, style=MATH_STYLE)


def render_text(text: str, delimiter: str = DEFAULT_DELIMITER) -> Text:
    """Render ``text`` with each math segment styled independently."""

    rendered = Text()
    for seg in segment(text, delimiter):
        if seg.kind is SegmentKind.MATH:
            rendered.append_text(render_math(seg.content))
        else:
            rendered.append(seg.content)
    return rendered


def render_chart(
    kind: Optional[GraphKind],
    series: Series,
    *,
    width: int = 40,
    height: int = 10,
    title: Optional[str] = None,
) -> Optional[RenderableType]:
    """Return a renderable for ``series`` or ``None`` when there is no visual.

    ``line``, ``bar`` and ``scatter`` plot each record's ``x``/``y`` keys;
    ``table`` shows every key found across the records.
    """

    if kind is None or not series:
        return None
    if kind is GraphKind.TABLE:
        return _render_table(series, title)
    points = _numeric_points(series)
    if not points:
        return None
    if kind is GraphKind.BAR:
        body: RenderableType = _render_bars(points, width)
    else:
        body = _render_grid(points, height, connect=kind is GraphKind.LINE)
    return Panel(
        body,
        title=title or kind.value.title(),
        box=box.ROUNDED,
        expand=False,
    )


def _render_table(series: Series, title: Optional[str]) -> Table:
    headers: dict[str, None] = {}
    for row in series:
        for key in row:
            headers.setdefault(str(key), None)
    table = Table(title=title, box=box.SIMPLE_HEAD, expand=False)
    # Keys and values come from the question set and are never markup.
    for header in headers:
        table.add_column(Text(header))
    for row in series:
        table.add_row(
            *(Text(_cell(row.get(header))) for header in headers)
        )
    return table


def _cell(value: object) -> str:
    return "" if value is None else str(value)


def _numeric_points(series: Series) -> list[tuple[str, float]]:
    points: list[tuple[str, float]] = []
    for position, row in enumerate(series):
        y = row.get("y")
        if isinstance(y, bool) or not isinstance(y, Real):
            continue
        label = row.get("x", position)
        points.append((_cell(label), float(y)))
    return points


def _render_bars(points: list[tuple[str, float]], width: int) -> Table:
    peak = max(abs(value) for _, value in points) or 1.0
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("x", justify="right", style="cyan")
    table.add_column("bar")
    table.add_column("y", justify="right", style="dim")
    for label, value in points:
        length = round(abs(value) / peak * width)
        style = "red" if value < 0 else "green"
        bar = Text(BAR_GLYPH * length, style=style)
        table.add_row(Text(label), bar, f"{value:g}")
    return table


def _render_grid(
    points: list[tuple[str, float]], height: int, *, connect: bool
) -> Text:
    rows = max(2, height)
    low = min(value for _, value in points)
    high = max(value for _, value in points)
    span = (high - low) or 1.0
    levels = [round((value - low) / span * (rows - 1)) for _, value in points]

    grid = [[" "] * (len(points) * 2) for _ in range(rows)]
    for column, level in enumerate(levels):
        x = column * 2
        if connect and column:
            previous = levels[column - 1]
            low_end, high_end = sorted((previous, level))
            for between in range(low_end + 1, high_end):
                grid[between][x] = LINK_GLYPH
        grid[level][x] = LINE_GLYPH if connect else SCATTER_GLYPH

    axis_width = max(len(f"{high:g}"), len(f"{low:g}"))
    text = Text()
    for row in range(rows - 1, -1, -1):
        if row == rows - 1:
            label = f"{high:g}"
        elif row == 0:
            label = f"{low:g}"
        else:
            label = ""
        text.append(label.rjust(axis_width) + " ┤", style="dim")
        text.append("".join(grid[row]).rstrip(), style="bright_magenta")
        text.append("\n")
    axis = " " * axis_width + " └" + "─" * (len(points) * 2)
    text.append(axis, style="dim")
    text.append("\n" + " " * (axis_width + 2))
    text.append(" ".join(label[:1] or "·" for label, _ in points), style="dim")
    return text
