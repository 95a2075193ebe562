"""
Column layout for the performance log table.

The panel shows four columns per row: the span name, the baseline flag,
the duration and the start time. Widths are in terminal cells; the name
column absorbs whatever width is left over.
"""

from dataclasses import dataclass
from typing import Callable, List

from ..core.model import PerformanceLogEntry


@dataclass(frozen=True)
class Column:
    key: str
    title: str
    width: int
    render: Callable[[PerformanceLogEntry], str]


def _number(value: float) -> str:
    # Integral timings print without a trailing ".0"
    if value == int(value):
        return str(int(value))
    return f"{value:.3f}"


def create_column_config() -> List[Column]:
    """Return the table's columns, left to right."""
    return [
        Column("name", "Name", 48, lambda e: e.name),
        Column("isBase", "isBase", 6, lambda e: "true" if e.is_base else ""),
        Column("duration", "Duration", 10, lambda e: _number(e.duration)),
        Column("startTime", "StartTime", 16, lambda e: _number(e.start_time)),
    ]


def _fit(columns: List[Column], width: int) -> List[int]:
    """Compute per-column widths for a given total line width."""
    fixed = sum(c.width for c in columns[1:]) + len(columns) - 1
    return [max(8, width - fixed)] + [c.width for c in columns[1:]]


def format_header(columns: List[Column], width: int) -> str:
    widths = _fit(columns, width)
    cells = [c.title[:w].ljust(w) for c, w in zip(columns, widths)]
    return " ".join(cells)[:width]


def format_row(entry: PerformanceLogEntry, columns: List[Column], width: int) -> str:
    """
    Render one entry as a fixed-width table line.

    Args:
        entry: The row to render.
        columns: Column configuration from create_column_config().
        width: Total available width in cells.

    Returns:
        str: The line, at most ``width`` characters long.
    """
    widths = _fit(columns, width)
    cells = []
    for column, w in zip(columns, widths):
        text = column.render(entry)
        if len(text) > w:
            # Keep the tail of long names; module paths differ at the end
            text = "…" + text[-(w - 1):] if column.key == "name" else text[:w]
        cells.append(text.ljust(w) if column.key == "name" else text.rjust(w))
    return " ".join(cells)[:width]
