from __future__ import annotations

import pytest

from gridcalc.engine.evaluator import Evaluator
from gridcalc.grid.writer import render_cell, render_grid
from gridcalc.models.value import Error, ErrorKind, Text, literal_value


def test_render_evaluated_grid(make_grid):
    grid = make_grid(["2", "3", "=SUM(A1, B1)"], ["x", '=CONCAT(A2, "y")'])
    Evaluator(grid).evaluate_all()
    assert render_grid(grid) == "2|3|5\nx|xy\n"


def test_render_uses_separator(make_grid):
    grid = make_grid(["a", "b"])
    Evaluator(grid).evaluate_all()
    assert render_grid(grid, separator=", ") == "a, b\n"


def test_render_empty_grid(make_grid):
    assert render_grid(make_grid()) == ""


def test_errors_render_as_their_sentinel(make_grid):
    grid = make_grid(["=B1", "=A1", "=SUM(1, \"x\")"])
    Evaluator(grid).evaluate_all()
    assert render_grid(grid) == "#CIRCULAR_REFERENCE|#CIRCULAR_REFERENCE|#NON_NUMERIC_ARGUMENT\n"


def test_single_error_sentinel_overrides_kinds(make_grid):
    grid = make_grid(["=B1", "=A1", "1"])
    Evaluator(grid).evaluate_all()
    assert render_grid(grid, error_sentinel="#ERR") == "#ERR|#ERR|1\n"


def test_sequence_cell_renders_joined(make_grid):
    grid = make_grid(["=SPREAD(1, \"a\", 2)"])
    Evaluator(grid).evaluate_all()
    assert render_grid(grid) == "1,a,2\n"


def test_unevaluated_cell_renders_source(make_grid):
    grid = make_grid(["=SUM(1, 2)"])
    assert render_cell(grid.cell(0, 0)) == "SUM(1, 2)"


@pytest.mark.parametrize("value", [Error(ErrorKind.NO_ROW_ABOVE), Text("#NO_ROW_ABOVE")])
def test_error_text_and_error_value_look_alike(make_grid, value):
    grid = make_grid(["=1"])
    cell = grid.cell(0, 0)
    cell.begin_evaluation()
    cell.resolve(value)
    assert render_cell(cell) == "#NO_ROW_ABOVE"


def test_literal_cells_are_echoed_unchanged(make_grid):
    literals = ["007", "+5", "1.", ".5", "-0", "2.50", "00123.4500"]
    grid = make_grid(literals)
    Evaluator(grid).evaluate_all()
    assert render_grid(grid) == "|".join(literals) + "\n"


def test_formula_results_use_canonical_numbers(make_grid):
    grid = make_grid(["007", "=SUM(A1, 0)", "=TEXT(A1)", "=007"])
    Evaluator(grid).evaluate_all()
    assert render_grid(grid) == "007|7|007|7\n"


def test_rendered_literals_reparse_to_same_values(make_grid):
    grid = make_grid(["1", "2.50", "hello", "", "007", "+5", "1.", ".5"], ["=SUM(A1, B1)", "=TEXT(A1)", '=CONCAT("a", "b")'])
    Evaluator(grid).evaluate_all()
    rendered = render_grid(grid).splitlines()
    for line, row in zip(rendered, grid.rows, strict=True):
        for text, cell in zip(line.split("|"), row, strict=True):
            if isinstance(cell.value, Text) and cell.value.text != text:
                pytest.fail(f"{cell.address}: {text!r}")
            if not isinstance(cell.value, Text):
                assert literal_value(text) == cell.value
