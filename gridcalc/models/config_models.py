from __future__ import annotations

from dataclasses import dataclass

"""Config dataclass for the grid solver.

Built by gridcalc.config.loader from YAML, or used with its defaults when no
config file is present.
"""

__all__ = [
    "SolverConfig",
]


@dataclass(frozen=True)
class SolverConfig:
    """Root configuration object for a solver run."""
    delimiter: str = "|"  # Cell separator in the source file
    formula_marker: str = "="  # Leading character marking a formula cell
    output_separator: str = "|"  # Cell separator in the rendered output
    error_sentinel: str | None = None  # Single text for every error cell (None = per-kind sentinel)
    max_depth: int = 100  # Evaluation nesting bound
    error_log: bool = True  # Write failed cells to a JSON Lines log
    logs_directory: str = "./logs"
