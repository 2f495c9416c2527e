from __future__ import annotations

from gridcalc.models.grid import Cell, Grid
from gridcalc.models.value import Error

"""Grid renderer: one line per row, cell displays joined by a separator."""

__all__ = [
    "render_cell",
    "render_grid",
]


def render_cell(cell: Cell, error_sentinel: str | None = None) -> str:
    # unevaluated cells keep their raw text; rendering never evaluates
    if cell.value is None:
        return cell.source
    if isinstance(cell.value, Error) and error_sentinel is not None:
        return error_sentinel
    return cell.value.display()


def render_grid(grid: Grid, separator: str = "|", error_sentinel: str | None = None) -> str:
    lines = [
        separator.join(render_cell(cell, error_sentinel) for cell in row)
        for row in grid.rows
    ]
    return "\n".join(lines) + ("\n" if lines else "")
