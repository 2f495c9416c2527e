from __future__ import annotations

import csv
from dataclasses import dataclass
from io import StringIO
from pathlib import Path

import pandas as pd

from gridcalc.models.grid import Grid

"""Grid reader.

Source format: one row per line, cells separated by a single delimiter
character (default "|"). No quoting: double quotes belong to formula
syntax and are kept verbatim. Rows may have different lengths; the reader
remembers each row's own width so the ragged shape survives the
rectangular DataFrame. A blank line is a row with one empty cell.
"""

__all__ = [
    "GridReadError",
    "RawGrid",
    "read_grid_file",
    "normalize_grid",
    "load_grid",
]


class GridReadError(Exception):
    """Raised when the grid file is missing or cannot be parsed."""


@dataclass
class RawGrid:
    frame: pd.DataFrame  # rectangular, all cells as str, padding as NaN
    widths: list[int]  # number of cells actually present in each row (0 = blank line)


def read_grid_file(path: Path, delimiter: str = "|") -> RawGrid:
    """Read a delimited grid file into a rectangular DataFrame of strings.

    Parameters
    ----------
    path: grid file path
    delimiter: single-character cell separator
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise GridReadError(f"grid file not found: {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise GridReadError(f"cannot read grid file {path}: {e}") from e

    lines = text.splitlines()
    if not lines:
        return RawGrid(frame=pd.DataFrame(), widths=[])
    # a blank line has width 0; normalize_grid turns it into one empty cell
    widths = [line.count(delimiter) + 1 if line else 0 for line in lines]

    try:
        df = pd.read_csv(
            StringIO(text),
            sep=delimiter,
            header=None,
            names=list(range(max(max(widths), 1))),
            index_col=False,
            dtype=str,
            keep_default_na=False,  # "" stays "", only padding becomes NaN
            quoting=csv.QUOTE_NONE,
            skip_blank_lines=False,
            engine="python",
        )
    except (pd.errors.ParserError, ValueError) as e:
        raise GridReadError(f"cannot parse grid file {path}: {e}") from e

    if len(df) != len(widths):
        raise GridReadError(f"grid file {path}: expected {len(widths)} rows, parsed {len(df)}")
    return RawGrid(frame=df, widths=widths)


def normalize_grid(raw: RawGrid, formula_marker: str = "=") -> Grid:
    """Trim the DataFrame padding back to each row's width and build a Grid."""
    rows: list[list[str]] = []
    for (_, series), width in zip(raw.frame.iterrows(), raw.widths, strict=True):
        if width == 0:
            rows.append([""])
            continue
        cells: list[str] = []
        for val in series.tolist()[:width]:
            cells.append("" if pd.isna(val) else str(val))
        rows.append(cells)
    return Grid.from_rows(rows, formula_marker=formula_marker)


def load_grid(path: Path, delimiter: str = "|", formula_marker: str = "=") -> Grid:
    return normalize_grid(read_grid_file(path, delimiter), formula_marker)
