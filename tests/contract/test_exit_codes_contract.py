from __future__ import annotations

import re
from pathlib import Path

from gridcalc.cli import main as cli_main
from gridcalc.logging.init import reset_logging

"""Exit code contract: 0 all cells evaluated, 2 some cells failed, 1 fatal."""


def test_exit_code_all_success(write_config, write_grid, capsys):
    reset_logging()
    path = write_grid("1|2|=SUM(A1, B1)\n")
    code = cli_main([str(path)])
    out = capsys.readouterr().out
    assert code == 0
    assert "1|2|3\n" in out
    assert "SUMMARY cells=3 formulas=1 evaluated=3 failed=0" in out


def test_exit_code_partial_failure(write_config, write_grid, capsys):
    reset_logging()
    path = write_grid("1|=SUM(A1, \"x\")\n=A1|=FOO()\n")
    code = cli_main([str(path)])
    out = capsys.readouterr().out
    assert code == 2
    match = re.search(r"failed=(\d+)", out)
    assert match is not None, f"No 'failed=' found in output: {out}"
    assert int(match.group(1)) == 2


def test_exit_code_fatal_missing_grid(temp_workdir: Path, capsys):
    reset_logging()
    code = cli_main([str(temp_workdir / "data" / "absent.txt")])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR solver:" in out
    assert "SUMMARY" not in out


def test_exit_code_fatal_config(temp_workdir: Path, write_grid, capsys):
    reset_logging()
    (temp_workdir / "config" / "gridcalc.yml").write_text("max_depth: 0\n", encoding="utf-8")
    code = cli_main([str(write_grid("1\n"))])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR config:" in out


def test_exit_code_fatal_explicit_config_missing(temp_workdir: Path, write_grid, capsys):
    reset_logging()
    code = cli_main([str(write_grid("1\n")), "--config", str(temp_workdir / "nope.yml")])
    assert code == 1
    assert "ERROR config:" in capsys.readouterr().out
