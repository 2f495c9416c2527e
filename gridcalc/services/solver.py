from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

from ..engine.evaluator import Evaluator
from ..grid.reader import GridReadError, load_grid
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.config_models import SolverConfig
from ..models.evaluation_result import EvaluationResult
from ..models.grid import CellState, Grid
from ..models.value import Error
from .progress import ProgressTracker

"""Solver service: load one grid file, evaluate every cell, report.

Steps:
1. Load the grid (fatal SolverError if the file cannot be read)
2. Evaluate cells row by row with a TTY-only progress bar
3. Record every FAILED cell in the error log buffer and flush it once
4. Return the evaluated grid with aggregated metrics
"""

logger = logging.getLogger(__name__)

__all__ = [
    "SolverError",
    "evaluate_grid",
    "collect_failures",
    "solve_file",
]


class SolverError(Exception):
    """Fatal error that prevents a grid from being solved."""


def evaluate_grid(grid: Grid, evaluator: Evaluator) -> int:
    """Evaluate every cell row by row.

    Returns:
        Number of cells that ended FAILED
    """
    failed = 0
    with ProgressTracker(len(grid)) as progress:
        for row in grid.rows:
            for cell in row:
                evaluator.evaluate(cell)
            failed += sum(1 for c in row if c.state is CellState.FAILED)
            progress.finish_row(failed_cells=failed)
    return failed


def collect_failures(grid: Grid, file_name: str) -> list[ErrorRecord]:
    records: list[ErrorRecord] = []
    for cell in grid.iter_cells():
        if cell.state is not CellState.FAILED or not isinstance(cell.value, Error):
            continue
        err = cell.value
        records.append(
            ErrorRecord.create(
                file=file_name,
                row=cell.row + 1,
                column=cell.column + 1,
                cell=cell.address,
                error_type=err.kind.name,
                message=err.detail or err.kind.sentinel,
            )
        )
    return records


def solve_file(
    path: Path,
    config: SolverConfig,
    error_log: ErrorLogBuffer | None = None,
) -> tuple[Grid, EvaluationResult]:
    """Load, evaluate and summarise one grid file.

    Args:
        path: Grid source file
        config: Solver configuration
        error_log: Buffer receiving one record per failed cell (None = no log)

    Returns:
        The evaluated grid and its EvaluationResult

    Raises:
        SolverError: If the grid file cannot be loaded
    """
    start_time = datetime.now(UTC)

    try:
        grid = load_grid(path, delimiter=config.delimiter, formula_marker=config.formula_marker)
    except GridReadError as e:
        raise SolverError(str(e)) from e

    logger.debug(f"loaded {path.name}: rows={len(grid)} cells={grid.cell_count}")

    evaluator = Evaluator(grid, max_depth=config.max_depth)
    failed_cells = evaluate_grid(grid, evaluator)

    failures = collect_failures(grid, path.name)
    for record in failures:
        logger.debug(f"{record.cell}: {record.error_type} {record.message}")

    log_path: Path | None = None
    if error_log is not None and failures:
        for record in failures:
            error_log.append(record)
        try:
            log_path = error_log.flush()
        except OSError as e:
            logger.warning(f"error log not written: {e}")

    end_time = datetime.now(UTC)
    elapsed_seconds = (end_time - start_time).total_seconds()
    total_cells = grid.cell_count
    throughput = total_cells / elapsed_seconds if elapsed_seconds > 0 else 0.0

    result = EvaluationResult(
        total_cells=total_cells,
        formula_cells=sum(1 for c in grid.iter_cells() if c.is_formula),
        evaluated_cells=sum(1 for c in grid.iter_cells() if c.state is CellState.EVALUATED),
        failed_cells=failed_cells,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=elapsed_seconds,
        throughput_cells_per_sec=throughput,
        error_log_path=str(log_path) if log_path is not None else None,
    )
    return grid, result
