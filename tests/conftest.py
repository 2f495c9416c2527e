# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path
import pytest

from gridcalc.models.grid import Grid


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("GRIDCALC_CONFIG", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """delimiter: "|"
formula_marker: "="
output_separator: "|"
error_sentinel: null
max_depth: 50
error_log: true
logs_directory: ./logs
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "gridcalc.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def write_grid(temp_workdir: Path):
    """Write grid text to data/<name> and return its path."""
    def _write(text: str, name: str = "grid.txt") -> Path:
        path = temp_workdir / "data" / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write


@pytest.fixture()
def make_grid():
    """Build an in-memory Grid from rows of raw cell text."""
    def _make(*rows: list[str]) -> Grid:
        return Grid.from_rows(rows)
    return _make
