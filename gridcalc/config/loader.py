from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from gridcalc.models.config_models import SolverConfig

"""Config loader.

Responsibilities:
- Load a YAML config file (e.g. config/gridcalc.yml)
- Validate it against config_schema.json (unknown keys are rejected)
- Apply defaults for every missing key
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "load_config",
]

SCHEMA_PATH = Path(__file__).parent / "config_schema.json"
DEFAULT_CONFIG_PATH = Path("config/gridcalc.yml")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: Any) -> None:
    """Validate config data against the JSON schema.

    Args:
        data: Configuration data to validate

    Raises:
        ConfigError: If the schema file is missing or not valid JSON, or the
            config data fails validation (wrong types, unknown keys, ...).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path) -> SolverConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e

    _validate_config_schema(data)

    defaults = SolverConfig()
    return SolverConfig(
        delimiter=data.get("delimiter", defaults.delimiter),
        formula_marker=data.get("formula_marker", defaults.formula_marker),
        output_separator=data.get("output_separator", defaults.output_separator),
        error_sentinel=data.get("error_sentinel", defaults.error_sentinel),
        max_depth=data.get("max_depth", defaults.max_depth),
        error_log=data.get("error_log", defaults.error_log),
        logs_directory=data.get("logs_directory", defaults.logs_directory),
    )
