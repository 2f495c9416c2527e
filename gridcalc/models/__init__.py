"""Domain models for the grid solver.

Values, cells and the grid are used by the engine; the remaining models
carry configuration, failed-cell records and run metrics.
"""

from .config_models import SolverConfig
from .error_record import ErrorRecord
from .evaluation_result import EvaluationResult
from .grid import Cell, CellState, Grid
from .value import Error, ErrorKind, Number, Sequence, Text, Value

__all__ = [
    # Configuration models
    "SolverConfig",
    # Grid models
    "Cell",
    "CellState",
    "Grid",
    # Values
    "Error",
    "ErrorKind",
    "Number",
    "Sequence",
    "Text",
    "Value",
    # Reporting models
    "ErrorRecord",
    "EvaluationResult",
]
