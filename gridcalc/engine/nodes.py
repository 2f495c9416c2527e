from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Union

from ..models.grid import cell_address
from ..models.value import ErrorKind

"""Formula AST nodes.

A formula body parses into a tuple of top-level terms. Calls hold their
argument terms, so nesting is arbitrary. CopyMarker only appears in freshly
parsed formulas; the evaluator replaces it with the shifted terms of the
cell above (or an ErrorTerm) before evaluating.
"""

__all__ = [
    "StringLiteral",
    "NumberLiteral",
    "CellRef",
    "Call",
    "CopyMarker",
    "ErrorTerm",
    "Term",
    "shift_terms",
    "contains_copy_marker",
]


@dataclass(frozen=True)
class StringLiteral:
    text: str


@dataclass(frozen=True)
class NumberLiteral:
    amount: Decimal


@dataclass(frozen=True)
class CellRef:
    """Reference to another cell. Coordinates are zero-based.

    A pinned reference keeps its row when the formula holding it is copied
    down; it is used for a literal cell reached through a copy marker.
    """
    row: int
    column: int
    pinned: bool = False

    def shifted(self, rows: int) -> CellRef:
        if self.pinned:
            return self
        return CellRef(self.row + rows, self.column)

    @property
    def address(self) -> str:
        return cell_address(self.row, self.column)


@dataclass(frozen=True)
class Call:
    name: str  # upper-cased
    args: tuple[Term, ...]


@dataclass(frozen=True)
class CopyMarker:
    """The ^^ token: reuse the formula of the cell directly above."""


@dataclass(frozen=True)
class ErrorTerm:
    """A term already known to evaluate to an error (bad copy, unparsable formula)."""
    kind: ErrorKind
    detail: str = ""


Term = Union[StringLiteral, NumberLiteral, CellRef, Call, CopyMarker, ErrorTerm]


def shift_terms(terms: tuple[Term, ...], rows: int) -> tuple[Term, ...]:
    """Move every unpinned cell reference in terms down by rows."""
    shifted: list[Term] = []
    for term in terms:
        if isinstance(term, CellRef):
            shifted.append(term.shifted(rows))
        elif isinstance(term, Call):
            shifted.append(Call(term.name, shift_terms(term.args, rows)))
        else:
            shifted.append(term)
    return tuple(shifted)


def contains_copy_marker(terms: tuple[Term, ...]) -> bool:
    for term in terms:
        if isinstance(term, CopyMarker):
            return True
        if isinstance(term, Call) and contains_copy_marker(term.args):
            return True
    return False
