from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Evaluation result model: aggregated metrics of one solver run."""

__all__ = [
    "EvaluationResult",
]


@dataclass(frozen=True)
class EvaluationResult:
    """Metrics needed for the SUMMARY line and the exit code."""
    total_cells: int  # every cell in the grid, literal or formula
    formula_cells: int
    evaluated_cells: int  # cells that ended EVALUATED
    failed_cells: int  # cells that ended FAILED
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    throughput_cells_per_sec: float
    error_log_path: str | None = None

    @property
    def has_failures(self) -> bool:
        return self.failed_cells > 0
