"""
gridcalc

Evaluates a delimited grid of text cells in which a cell is either a literal
or a formula over other cells (CONCAT, TEXT, SUM, SPREAD, SPLIT, INCFROM and
the ^^ copy-from-above marker).
"""

from .engine.evaluator import Evaluator
from .grid.reader import load_grid
from .grid.writer import render_grid
from .models.grid import Cell, CellState, Grid

__version__ = "0.1.0"
__all__ = ["Cell", "CellState", "Evaluator", "Grid", "load_grid", "render_grid"]
