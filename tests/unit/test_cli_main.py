from __future__ import annotations

import os
from pathlib import Path

from gridcalc.cli import main as cli_main
from gridcalc.logging.init import reset_logging


def test_output_option_writes_file(write_grid, temp_workdir: Path, capsys):
    reset_logging()
    out_path = temp_workdir / "out.txt"
    code = cli_main([str(write_grid("2|=SUM(A1, 3)\n")), "-o", str(out_path)])
    out = capsys.readouterr().out
    assert code == 0
    assert out_path.read_text(encoding="utf-8") == "2|5\n"
    assert f"INFO Rendered grid written to: {out_path}" in out
    assert "2|5" not in out


def test_debug_mode_logs_cell_values(write_grid, capsys):
    reset_logging()
    code = cli_main([str(write_grid("2|=SUM(A1, 3)\n")), "--debug"])
    out = capsys.readouterr().out
    assert code == 0
    assert "DEBUG debug mode enabled" in out
    assert "DEBUG B1 -> 5" in out


def test_no_debug_lines_by_default(write_grid, capsys):
    reset_logging()
    cli_main([str(write_grid("1\n"))])
    assert "DEBUG" not in capsys.readouterr().out


def test_inspect_data(write_grid, capsys):
    reset_logging()
    code = cli_main([str(write_grid("a|b|c\nd\n")), "--inspect-data"])
    out = capsys.readouterr().out
    assert code == 0
    assert "FILE: grid.txt rows=2 max_cols=3" in out
    assert "SUMMARY" not in out


def test_inspect_data_missing_file(temp_workdir: Path, capsys):
    reset_logging()
    code = cli_main([str(temp_workdir / "none.txt"), "--inspect-data"])
    assert code == 1
    assert "inspect:" in capsys.readouterr().out


def test_config_from_env_var(temp_workdir: Path, write_grid, monkeypatch, capsys):
    reset_logging()
    cfg = temp_workdir / "custom.yml"
    cfg.write_text("output_separator: ','\n", encoding="utf-8")
    monkeypatch.setenv("GRIDCALC_CONFIG", str(cfg))
    cli_main([str(write_grid("1|2\n"))])
    assert "1,2\n" in capsys.readouterr().out


def test_config_from_dotenv(temp_workdir: Path, write_grid, capsys):
    reset_logging()
    cfg = temp_workdir / "dotenv.yml"
    cfg.write_text("error_sentinel: '#ERR'\n", encoding="utf-8")
    (temp_workdir / ".env").write_text(f"GRIDCALC_CONFIG={cfg}\n", encoding="utf-8")
    try:
        code = cli_main([str(write_grid("=FOO()|1\n"))])
    finally:
        # load_dotenv writes into os.environ directly
        os.environ.pop("GRIDCALC_CONFIG", None)
    assert code == 2
    assert "#ERR|1\n" in capsys.readouterr().out


def test_explicit_config_wins_over_env(temp_workdir: Path, write_grid, monkeypatch, capsys):
    reset_logging()
    env_cfg = temp_workdir / "env.yml"
    env_cfg.write_text("output_separator: ','\n", encoding="utf-8")
    arg_cfg = temp_workdir / "arg.yml"
    arg_cfg.write_text("output_separator: ';'\n", encoding="utf-8")
    monkeypatch.setenv("GRIDCALC_CONFIG", str(env_cfg))
    cli_main([str(write_grid("1|2\n")), "--config", str(arg_cfg)])
    assert "1;2\n" in capsys.readouterr().out
