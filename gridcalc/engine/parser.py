from __future__ import annotations

import re

from ..models.value import parse_decimal
from .nodes import Call, CellRef, CopyMarker, NumberLiteral, StringLiteral, Term
from .scanner import FormulaSyntaxError, find_matching_paren, split_arguments

"""Formula parser: builds the AST from a formula body.

Grammar (whitespace outside quotes is insignificant):

    term    := literal | cellRef | call | copyMarker
    call    := NAME '(' [term (',' term)*] ')'
    literal := quotedString | decimalNumber
    cellRef := UPPERCASE_LETTER DIGIT+      (all digits are consumed)
    copyMarker := '^^'
"""

__all__ = [
    "COPY_MARKER",
    "MAX_NESTING",
    "parse_formula",
    "parse_term",
]

COPY_MARKER = "^^"
MAX_NESTING = 100

CELL_RE = re.compile(r"^([A-Z])(\d+)$")
CALL_RE = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)\(")


def parse_formula(body: str) -> tuple[Term, ...]:
    """Parse a formula body (marker already stripped) into top-level terms.

    Raises:
        FormulaSyntaxError: If the body is not a valid term list.
    """
    return tuple(parse_term(arg) for arg in split_arguments(body))


def parse_term(text: str, depth: int = 0) -> Term:
    if depth > MAX_NESTING:
        raise FormulaSyntaxError(f"calls nested deeper than {MAX_NESTING}")
    if text == "":
        raise FormulaSyntaxError("empty argument")

    if text.startswith('"'):
        body = text[1:-1]
        if len(text) < 2 or not text.endswith('"') or '"' in body:
            raise FormulaSyntaxError(f"invalid string literal: {text}")
        return StringLiteral(body)

    if text == COPY_MARKER:
        return CopyMarker()

    m = CELL_RE.match(text)
    if m:
        return CellRef(row=int(m.group(2)) - 1, column=ord(m.group(1)) - ord("A"))

    amount = parse_decimal(text)
    if amount is not None:
        return NumberLiteral(amount)

    m = CALL_RE.match(text)
    if m:
        open_index = m.end() - 1
        close_index = find_matching_paren(text, open_index)
        if close_index != len(text) - 1:
            raise FormulaSyntaxError(f"unexpected text after call: {text[close_index + 1:]}")
        inner = text[open_index + 1:close_index]
        args = tuple(parse_term(arg, depth + 1) for arg in split_arguments(inner))
        return Call(name=m.group(1).upper(), args=args)

    raise FormulaSyntaxError(f"unrecognized term: {text}")
