from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from decimal import MAX_EMAX, MAX_PREC, MIN_EMIN, Decimal, Inexact, localcontext

from ..models.value import (
    Error,
    ErrorKind,
    Number,
    Sequence,
    Text,
    Value,
    first_error,
    parse_decimal,
)

"""Built-in function library.

Each built-in is a pure function over the already-evaluated argument list
and returns a Value. Errors are returned, never raised.

SPLIT and INCFROM are provisional: they implement only the observed
placeholder behaviour (drop the last two arguments / return the first one).
"""

__all__ = [
    "Builtin",
    "FunctionRegistry",
    "concat",
    "text",
    "sum_",
    "spread",
    "split",
    "inc_from",
    "exact_sum",
    "default_registry",
]

BuiltinFn = Callable[[list[Value]], Value]


@dataclass(frozen=True)
class Builtin:
    name: str
    fn: BuiltinFn
    provisional: bool = False


class FunctionRegistry:
    """Name → built-in mapping with case-insensitive lookup.

    No registered name may be a suffix of another one, so a name can never
    be mistaken for the tail of a longer keyword.
    """

    def __init__(self) -> None:
        self._builtins: dict[str, Builtin] = {}

    def register(self, name: str, fn: BuiltinFn, *, provisional: bool = False) -> None:
        key = name.upper()
        for existing in self._builtins:
            if existing.endswith(key) or key.endswith(existing):
                raise ValueError(f"function name {key!r} overlaps registered name {existing!r}")
        self._builtins[key] = Builtin(name=key, fn=fn, provisional=provisional)

    def get(self, name: str) -> Builtin | None:
        return self._builtins.get(name.upper())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.upper() in self._builtins

    def names(self) -> list[str]:
        return sorted(self._builtins)


def concat(args: list[Value]) -> Value:
    err = first_error(args)
    if err is not None:
        return err
    parts: list[str] = []
    for arg in args:
        if not isinstance(arg, Text):
            return Error(ErrorKind.CANNOT_CONCATENATE_NON_STRING, f"CONCAT got {arg.formula_text()}")
        parts.append(arg.text)
    return Text("".join(parts))


def text(args: list[Value]) -> Value:
    if not args:
        return Error(ErrorKind.MALFORMED, "TEXT needs one argument")
    if isinstance(args[0], Error):
        return args[0]
    return Text(args[0].display())


def sum_(args: list[Value]) -> Value:
    err = first_error(args)
    if err is not None:
        return err
    amounts: list[Decimal] = []
    for arg in args:
        if isinstance(arg, Number):
            amounts.append(arg.amount)
        elif isinstance(arg, Text):
            if arg.text == "":
                continue  # blank cell
            amount = parse_decimal(arg.text)
            if amount is None:
                return Error(ErrorKind.NON_NUMERIC_ARGUMENT, f"SUM got {arg.formula_text()}")
            amounts.append(amount)
        else:
            return Error(ErrorKind.NON_NUMERIC_ARGUMENT, f"SUM got {arg.formula_text()}")
    return Number(exact_sum(amounts))


def exact_sum(amounts: list[Decimal]) -> Decimal:
    """Sum without rounding, whatever the number of significant digits.

    The default decimal context keeps 28 digits; addition here runs in an
    unbounded context with Inexact trapped, so any rounding would raise.
    """
    with localcontext() as ctx:
        ctx.prec = MAX_PREC
        ctx.Emax = MAX_EMAX
        ctx.Emin = MIN_EMIN
        ctx.traps[Inexact] = True
        total = Decimal(0)
        for amount in amounts:
            total += amount
        return _normalize(total)


def spread(args: list[Value]) -> Value:
    return Sequence(tuple(args))


def split(args: list[Value]) -> Value:
    err = first_error(args)
    if err is not None:
        return err
    if len(args) < 2:
        return Error(ErrorKind.MALFORMED, "SPLIT needs at least two arguments")
    return Sequence(tuple(args[:-2]))


def inc_from(args: list[Value]) -> Value:
    err = first_error(args)
    if err is not None:
        return err
    if not args:
        return Error(ErrorKind.MALFORMED, "INCFROM needs one argument")
    return args[0]


def _normalize(amount: Decimal) -> Decimal:
    # 1.50 + 1.50 -> 3, 0.10 + 0.20 -> 0.3
    if amount == amount.to_integral_value():
        return amount.to_integral_value()
    return amount.normalize()


def default_registry() -> FunctionRegistry:
    registry = FunctionRegistry()
    registry.register("CONCAT", concat)
    registry.register("TEXT", text)
    registry.register("SUM", sum_)
    registry.register("SPREAD", spread)
    registry.register("SPLIT", split, provisional=True)
    registry.register("INCFROM", inc_from, provisional=True)
    return registry
