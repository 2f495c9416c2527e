"""Formula engine: scanner, parser, function library and evaluator."""

from .evaluator import DEFAULT_MAX_DEPTH, Evaluator
from .functions import FunctionRegistry, default_registry
from .parser import parse_formula
from .scanner import FormulaSyntaxError, split_arguments

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "Evaluator",
    "FormulaSyntaxError",
    "FunctionRegistry",
    "default_registry",
    "parse_formula",
    "split_arguments",
]
