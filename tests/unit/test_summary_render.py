from __future__ import annotations

from datetime import datetime, timezone

from gridcalc.models.evaluation_result import EvaluationResult
from gridcalc.services.summary import render_summary_line


def _result(**overrides) -> EvaluationResult:
    start = datetime(2024, 5, 1, 9, 0, 0, tzinfo=timezone.utc)
    end = datetime(2024, 5, 1, 9, 0, 1, 500000, tzinfo=timezone.utc)
    fields = dict(
        total_cells=12,
        formula_cells=5,
        evaluated_cells=10,
        failed_cells=2,
        start_time=start,
        end_time=end,
        elapsed_seconds=1.5,
        throughput_cells_per_sec=8.0,
    )
    fields.update(overrides)
    return EvaluationResult(**fields)


def test_render_summary_line():
    assert render_summary_line(_result()) == (
        "SUMMARY cells=12 formulas=5 evaluated=10 failed=2 elapsed_sec=1.5 throughput_cps=8"
    )


def test_zero_elapsed_time():
    line = render_summary_line(_result(elapsed_seconds=0.0, throughput_cells_per_sec=0.0))
    assert line.endswith("elapsed_sec=0 throughput_cps=0")


def test_small_elapsed_time_avoids_scientific_notation():
    line = render_summary_line(_result(elapsed_seconds=0.000123))
    assert "elapsed_sec=0.000123" in line
    assert "e-" not in line


def test_has_failures():
    assert _result().has_failures
    assert not _result(failed_cells=0).has_failures
