from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from gridcalc.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from gridcalc.grid.reader import GridReadError, read_grid_file
from gridcalc.grid.writer import render_grid
from gridcalc.logging.error_log import ErrorLogBuffer
from gridcalc.logging.init import log_summary, setup_logging
from gridcalc.models.config_models import SolverConfig
from gridcalc.services.solver import SolverError, solve_file
from gridcalc.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env, then the config (--config, $GRIDCALC_CONFIG, config/gridcalc.yml
  or built-in defaults)
- Solve the input grid and write the rendered grid to --output or stdout
- Log a SUMMARY line and exit 0 (all cells evaluated), 2 (some cells
  failed) or 1 (fatal)
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

CONFIG_ENV_VAR = "GRIDCALC_CONFIG"


def _load_env_file(path: Path) -> None:
    """Load .env using python-dotenv. Existing environment variables win."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=False)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="gridcalc", description="Evaluate a delimited grid of formula cells")
    p.add_argument("input", type=Path, help="Grid file to evaluate")
    p.add_argument("--config", type=Path, default=None, help="YAML config file")
    p.add_argument("-o", "--output", type=Path, default=None, help="Write the rendered grid here instead of stdout")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print the raw grid shape & first rows then exit")
    return p.parse_args(argv)


def _resolve_config(args: argparse.Namespace) -> SolverConfig:
    """Pick the config file by precedence; defaults when none is configured."""
    if args.config is not None:
        return load_config(args.config)
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return load_config(Path(env_path))
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    return SolverConfig()


def _inspect_data(path: Path, cfg: SolverConfig) -> int:
    try:
        raw = read_grid_file(path, delimiter=cfg.delimiter)
    except GridReadError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    rows, cols = raw.frame.shape
    print(f"FILE: {path.name} rows={rows} max_cols={cols}")
    if rows:
        print(raw.frame.head(5).fillna("").to_string(header=False))
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    # None only -> read sys.argv; an explicit [] must not pick up pytest's arguments
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    if args.debug:
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"))
    try:
        cfg = _resolve_config(args)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(args.input, cfg)

    logger.info(f"Evaluating grid: {args.input}")
    error_log = ErrorLogBuffer(Path(cfg.logs_directory)) if cfg.error_log else None
    try:
        grid, result = solve_file(args.input, cfg, error_log=error_log)
    except SolverError as e:
        logger.error(f"solver: {e}")
        return EXIT_FATAL

    rendered = render_grid(grid, separator=cfg.output_separator, error_sentinel=cfg.error_sentinel)
    if args.output is not None:
        try:
            args.output.write_text(rendered, encoding="utf-8")
        except OSError as e:
            logger.error(f"output: {e}")
            return EXIT_FATAL
        logger.info(f"Rendered grid written to: {args.output}")
    else:
        sys.stdout.write(rendered)
        sys.stdout.flush()

    if result.error_log_path:
        logger.info(f"Failed cells logged to: {result.error_log_path}")

    # render_summary_line includes the label; log_summary adds it again
    log_summary(render_summary_line(result)[len("SUMMARY "):])

    if result.has_failures:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
