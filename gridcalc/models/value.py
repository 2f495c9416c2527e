from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Union

"""Value model for evaluated cells.

Every evaluation result is one of four tagged variants:

- Text: a plain string (quotes are surface syntax, not part of the value)
- Number: an exact decimal
- Sequence: an ordered list of values produced by SPREAD / SPLIT or by a
  formula with several top-level terms
- Error: an error sentinel identified by its ErrorKind

Errors are ordinary values; nothing in the engine raises them.
"""

__all__ = [
    "ErrorKind",
    "Text",
    "Number",
    "Sequence",
    "Error",
    "Value",
    "DECIMAL_RE",
    "parse_decimal",
    "format_decimal",
    "literal_value",
    "first_error",
]

# Plain decimal literal: optional sign, digits, optional fraction. No exponent.
DECIMAL_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)$")


class ErrorKind(Enum):
    """Error taxonomy. The enum value is the sentinel rendered in output."""
    MALFORMED = "#MALFORMED"
    CANNOT_CONCATENATE_NON_STRING = "#CANNOT_CONCATENATE_NON_STRING"
    NON_NUMERIC_ARGUMENT = "#NON_NUMERIC_ARGUMENT"
    CIRCULAR_REFERENCE = "#CIRCULAR_REFERENCE"
    NO_ROW_ABOVE = "#NO_ROW_ABOVE"
    UNKNOWN_FUNCTION = "#UNKNOWN_FUNCTION"
    UNDEFINED_CELL_REFERENCE = "#UNDEFINED_CELL_REFERENCE"
    DEPTH_EXCEEDED = "#DEPTH_EXCEEDED"

    @property
    def sentinel(self) -> str:
        return self.value


@dataclass(frozen=True)
class Text:
    text: str

    def display(self) -> str:
        return self.text

    def formula_text(self) -> str:
        return f'"{self.text}"'


@dataclass(frozen=True)
class Number:
    """Exact decimal. `lexeme` is the text a literal cell was written as.

    Equality compares the amount only, so "007" equals 7.
    """
    amount: Decimal
    lexeme: str | None = field(default=None, compare=False)

    def display(self) -> str:
        if self.lexeme is not None:
            return self.lexeme
        return format_decimal(self.amount)

    def formula_text(self) -> str:
        return format_decimal(self.amount)


@dataclass(frozen=True)
class Sequence:
    items: tuple[Value, ...]

    def display(self) -> str:
        return ",".join(item.display() for item in self.items)

    def formula_text(self) -> str:
        return ",".join(item.formula_text() for item in self.items)


@dataclass(frozen=True)
class Error:
    """Error value. Equality compares the kind only; detail is diagnostic."""
    kind: ErrorKind
    detail: str = field(default="", compare=False)

    def display(self) -> str:
        return self.kind.sentinel

    def formula_text(self) -> str:
        return self.kind.sentinel


Value = Union[Text, Number, Sequence, Error]


def parse_decimal(text: str) -> Decimal | None:
    """Parse a plain decimal literal, returning None when text is not one."""
    if not DECIMAL_RE.match(text):
        return None
    return Decimal(text)


def format_decimal(amount: Decimal) -> str:
    """Canonical decimal text without exponent notation."""
    return format(amount, "f")


def literal_value(source: str) -> Value:
    """Classify the raw text of a literal cell.

    A plain decimal becomes Number and keeps its written text, so "007",
    "+5" and "2.50" render unchanged; anything else, including "", becomes
    Text.
    """
    amount = parse_decimal(source)
    if amount is None:
        return Text(source)
    return Number(amount, lexeme=source)


def first_error(values: list[Value] | tuple[Value, ...]) -> Error | None:
    """Return the first Error in values (left to right), or None."""
    for v in values:
        if isinstance(v, Error):
            return v
    return None
