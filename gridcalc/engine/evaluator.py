from __future__ import annotations

import logging

from ..models.grid import Cell, CellState, Grid
from ..models.value import Error, ErrorKind, Number, Sequence, Text, Value, literal_value
from .functions import FunctionRegistry, default_registry
from .nodes import (
    Call,
    CellRef,
    CopyMarker,
    ErrorTerm,
    NumberLiteral,
    StringLiteral,
    Term,
    contains_copy_marker,
    shift_terms,
)
from .parser import parse_formula
from .scanner import FormulaSyntaxError

"""Formula evaluator.

Evaluates cells by structural recursion over the parsed formula:

- nested calls resolve innermost first; Sequence results are spliced into
  the enclosing argument list
- cell references evaluate (and memoize) the referenced cell
- the copy marker stands for the formula of the cell above with every cell
  reference shifted down one row; it is expanded once per cell and the
  expansion is cached, so a filled-down column costs one step per row
- the first Error short-circuits the rest of the formula and is memoized on
  the cell as FAILED
- a cell met again while still EVALUATING is a circular reference
- nesting beyond max_depth yields DEPTH_EXCEEDED instead of exhausting the
  interpreter stack
"""

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "Evaluator",
]

# Each level costs a handful of Python frames; keep well under the
# interpreter's default recursion limit of 1000.
DEFAULT_MAX_DEPTH = 100

logger = logging.getLogger(__name__)


class Evaluator:
    """Evaluates cells of one grid. The grid is the only mutable state."""

    def __init__(
        self,
        grid: Grid,
        functions: FunctionRegistry | None = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        if max_depth < 1:
            raise ValueError("max_depth must be >= 1")
        self.grid = grid
        self.functions = functions if functions is not None else default_registry()
        self.max_depth = max_depth
        self._depth = 0
        self._warned_provisional: set[str] = set()

    def evaluate(self, cell: Cell) -> Value:
        """Evaluate a cell, memoizing its value on the cell."""
        if cell.is_resolved:
            assert cell.value is not None
            return cell.value
        if cell.state is CellState.EVALUATING:
            logger.debug(f"circular reference reached {cell.address}")
            return cell.resolve(Error(ErrorKind.CIRCULAR_REFERENCE, f"{cell.address} depends on itself"))

        cell.begin_evaluation()
        if cell.is_formula:
            value = self._evaluate_formula(cell)
        else:
            value = literal_value(cell.source)
        logger.debug(f"{cell.address} -> {value.formula_text()}")
        return cell.resolve(value)

    def evaluate_all(self) -> Grid:
        """Evaluate every cell in row-major order."""
        for cell in self.grid.iter_cells():
            self.evaluate(cell)
        return self.grid

    def _evaluate_formula(self, cell: Cell) -> Value:
        values = self._evaluate_terms(self._terms_of(cell))
        if isinstance(values, Error):
            return values
        return _collapse(values)

    def _terms_of(self, cell: Cell) -> tuple[Term, ...]:
        """Effective terms of a formula cell, with copy markers expanded.

        Walks up the column (iteratively) only as far as copy markers reach
        cells whose terms are not cached yet, then expands top-down so each
        cell reads the cached terms of the cell above it.
        """
        if cell.terms is not None:
            return cell.terms

        pending: list[tuple[Cell, tuple[Term, ...]]] = []
        current: Cell | None = cell
        while current is not None:
            raw = self._parse(current)
            pending.append((current, raw))
            if not contains_copy_marker(raw):
                break
            above = self.grid.cell(current.row - 1, current.column)
            if above is None or not above.is_formula or above.terms is not None:
                break
            current = above

        for target, raw in reversed(pending):
            target.terms = self._expand_copies(raw, target)
        assert cell.terms is not None
        return cell.terms

    def _parse(self, cell: Cell) -> tuple[Term, ...]:
        try:
            return parse_formula(cell.source)
        except FormulaSyntaxError as e:
            # cached like any other formula so copies below do not re-parse it
            return (ErrorTerm(ErrorKind.MALFORMED, f"{cell.address}: {e}"),)

    def _expand_copies(self, terms: tuple[Term, ...], cell: Cell) -> tuple[Term, ...]:
        expanded: list[Term] = []
        for term in terms:
            if isinstance(term, CopyMarker):
                expanded.extend(self._copied_terms(cell))
            elif isinstance(term, Call):
                expanded.append(Call(term.name, self._expand_copies(term.args, cell)))
            else:
                expanded.append(term)
        return tuple(expanded)

    def _copied_terms(self, cell: Cell) -> tuple[Term, ...]:
        above_row = cell.row - 1
        if above_row < 0:
            return (ErrorTerm(ErrorKind.NO_ROW_ABOVE, "copy marker used in the first row"),)
        above = self.grid.cell(above_row, cell.column)
        if above is None:
            return (
                ErrorTerm(
                    ErrorKind.UNDEFINED_CELL_REFERENCE,
                    f"no cell above at {CellRef(above_row, cell.column).address}",
                ),
            )
        if not above.is_formula:
            return (CellRef(above_row, cell.column, pinned=True),)
        assert above.terms is not None
        if not above.terms:
            # an empty formula evaluates to "", which still counts as one value
            return (StringLiteral(""),)
        return shift_terms(above.terms, 1)

    def _evaluate_terms(self, terms: tuple[Term, ...]) -> list[Value] | Error:
        values: list[Value] = []
        for term in terms:
            value = self._evaluate_term(term)
            if isinstance(value, Error):
                return value
            if isinstance(value, Sequence):
                values.extend(value.items)
            else:
                values.append(value)
        return values

    def _evaluate_term(self, term: Term) -> Value:
        self._depth += 1
        try:
            if self._depth > self.max_depth:
                return Error(ErrorKind.DEPTH_EXCEEDED, f"evaluation nested deeper than {self.max_depth}")
            if isinstance(term, StringLiteral):
                return Text(term.text)
            if isinstance(term, NumberLiteral):
                return Number(term.amount)
            if isinstance(term, CellRef):
                return self._evaluate_reference(term)
            if isinstance(term, ErrorTerm):
                return Error(term.kind, term.detail)
            if isinstance(term, Call):
                return self._evaluate_call(term)
            raise TypeError(f"unexpanded term {term!r}")
        finally:
            self._depth -= 1

    def _evaluate_reference(self, ref: CellRef) -> Value:
        target = self.grid.cell(ref.row, ref.column)
        if target is None:
            return Error(ErrorKind.UNDEFINED_CELL_REFERENCE, f"{ref.address} is outside the grid")
        return self.evaluate(target)

    def _evaluate_call(self, call: Call) -> Value:
        builtin = self.functions.get(call.name)
        if builtin is None:
            return Error(ErrorKind.UNKNOWN_FUNCTION, f"unknown function {call.name}")
        args = self._evaluate_terms(call.args)
        if isinstance(args, Error):
            return args
        if builtin.provisional and builtin.name not in self._warned_provisional:
            self._warned_provisional.add(builtin.name)
            logger.warning(f"{builtin.name} is a provisional function; its behaviour may change")
        return builtin.fn(args)


def _collapse(values: list[Value]) -> Value:
    if not values:
        return Text("")
    if len(values) == 1:
        return values[0]
    return Sequence(tuple(values))
