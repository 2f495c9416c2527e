from __future__ import annotations

from ..models.evaluation_result import EvaluationResult

"""Summary line rendering service."""


def _format_number(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # Format very small numbers to avoid scientific notation
        return f"{value:.6f}".rstrip('0').rstrip('.')
    return str(round(value, 6))


def render_summary_line(result: EvaluationResult) -> str:
    """Render the SUMMARY line for one solver run.

    Format:
    SUMMARY cells={total} formulas={formulas} evaluated={evaluated}
    failed={failed} elapsed_sec={elapsed} throughput_cps={throughput}

    Examples:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2023, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2023, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = EvaluationResult(
        ...     total_cells=12, formula_cells=4, evaluated_cells=11, failed_cells=1,
        ...     start_time=start, end_time=end,
        ...     elapsed_seconds=2.0, throughput_cells_per_sec=6.0
        ... )
        >>> render_summary_line(result)
        'SUMMARY cells=12 formulas=4 evaluated=11 failed=1 elapsed_sec=2 throughput_cps=6'
    """
    return (
        f"SUMMARY cells={result.total_cells} "
        f"formulas={result.formula_cells} "
        f"evaluated={result.evaluated_cells} "
        f"failed={result.failed_cells} "
        f"elapsed_sec={_format_number(result.elapsed_seconds)} "
        f"throughput_cps={_format_number(result.throughput_cells_per_sec)}"
    )
