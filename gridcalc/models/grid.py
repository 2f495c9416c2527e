from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from .value import Error, Text, Value

if TYPE_CHECKING:
    from ..engine.nodes import Term

"""Cell and Grid domain models.

The Grid owns every Cell for the duration of a run. Cells are created once
at load time and only change through the state transitions below, driven by
the evaluator.
"""

__all__ = [
    "CellState",
    "Cell",
    "Grid",
    "InvalidTransitionError",
    "column_letter",
    "cell_address",
]


def column_letter(column: int) -> str:
    return chr(ord("A") + column)


def cell_address(row: int, column: int) -> str:
    """A1-style address of zero-based (row, column)."""
    return f"{column_letter(column)}{row + 1}"


class InvalidTransitionError(RuntimeError):
    """Raised when a cell state transition is not allowed."""


class CellState(Enum):
    """Evaluation lifecycle of a cell.

    State transitions: unevaluated → evaluating → (evaluated | failed)

    - UNEVALUATED: Cell loaded but not yet visited
    - EVALUATING: Cell is on the current evaluation path (cycle guard)
    - EVALUATED: Cell resolved to a non-error value (memoized)
    - FAILED: Cell resolved to an Error value (memoized)

    A cell found in EVALUATING may also go straight to FAILED when a
    circular reference reaches it.
    """
    UNEVALUATED = "unevaluated"
    EVALUATING = "evaluating"
    EVALUATED = "evaluated"
    FAILED = "failed"


@dataclass
class Cell:
    """One addressable slot of the grid.

    `source` is the raw literal text, or the formula body with the formula
    marker already stripped when `is_formula` is set. `terms` caches the
    parsed formula with every copy marker already expanded.
    """
    row: int     # zero-based
    column: int  # zero-based
    source: str
    is_formula: bool = False
    state: CellState = CellState.UNEVALUATED
    value: Value | None = None
    terms: tuple[Term, ...] | None = field(default=None, repr=False)  # effective formula cache

    def __post_init__(self) -> None:
        if not self.is_formula and self.source == "":
            self.state = CellState.EVALUATED
            self.value = Text("")

    @property
    def address(self) -> str:
        return cell_address(self.row, self.column)

    @property
    def is_resolved(self) -> bool:
        return self.state in (CellState.EVALUATED, CellState.FAILED)

    def begin_evaluation(self) -> None:
        if self.state is not CellState.UNEVALUATED:
            raise InvalidTransitionError(f"{self.address}: cannot start evaluation from {self.state.value}")
        self.state = CellState.EVALUATING

    def resolve(self, value: Value) -> Value:
        """Memoize the result; Error values move the cell to FAILED."""
        if self.state is not CellState.EVALUATING and not (
            # a cell that already failed through a circular reference keeps its error
            self.state is CellState.FAILED and isinstance(value, Error)
        ):
            raise InvalidTransitionError(f"{self.address}: cannot resolve from {self.state.value}")
        self.state = CellState.FAILED if isinstance(value, Error) else CellState.EVALUATED
        self.value = value
        return value


class Grid:
    """Ragged two-dimensional store of cells (rows may differ in length)."""

    def __init__(self, rows: list[list[Cell]]) -> None:
        self._rows = rows

    @classmethod
    def from_rows(cls, raw_rows: Iterable[Iterable[str]], formula_marker: str = "=") -> Grid:
        rows: list[list[Cell]] = []
        for r, raw in enumerate(raw_rows):
            row: list[Cell] = []
            for c, text in enumerate(raw):
                if formula_marker and text.startswith(formula_marker):
                    row.append(Cell(row=r, column=c, source=text[len(formula_marker):], is_formula=True))
                else:
                    row.append(Cell(row=r, column=c, source=text))
            rows.append(row)
        return cls(rows)

    def __len__(self) -> int:
        return len(self._rows)

    @property
    def rows(self) -> list[list[Cell]]:
        return self._rows

    def cell(self, row: int, column: int) -> Cell | None:
        """Return the cell at (row, column), or None outside the ragged bounds."""
        if row < 0 or column < 0 or row >= len(self._rows):
            return None
        cells = self._rows[row]
        if column >= len(cells):
            return None
        return cells[column]

    def iter_cells(self) -> Iterator[Cell]:
        for row in self._rows:
            yield from row

    @property
    def cell_count(self) -> int:
        return sum(len(row) for row in self._rows)
