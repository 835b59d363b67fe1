from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    DEFAULT_MIN_SHEET_ROWS,
    DEFAULT_TASK_NUMBER,
    EXPORT_FORMATS,
    ExtractConfig,
)

"""Config loader.

Responsibilities:
- Load the YAML config (config/extract.yml, or $TASKSHEET_CONFIG)
- Validate it against config_schema.json (unknown keys are rejected)
- Apply defaults and return an ExtractConfig
"""

__all__ = [
    "ConfigError",
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "resolve_config_path",
    "load_config",
]

CONFIG_ENV_VAR = "TASKSHEET_CONFIG"
DEFAULT_CONFIG_PATH = Path("config/extract.yml")
SCHEMA_PATH = Path(__file__).parent / "config_schema.json"


class ConfigError(Exception):
    pass


def resolve_config_path(explicit: Path | str | None = None) -> Path:
    """--config wins, then $TASKSHEET_CONFIG, then config/extract.yml."""
    if explicit:
        return Path(explicit)
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG_PATH


def _validate_config_schema(data: Any) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: the schema file is missing or not valid JSON, or the
            config violates the schema (missing keys, wrong types, extra keys).
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


def load_config(path: Path) -> ExtractConfig:
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e

    _validate_config_schema(data)

    formats = data.get("formats") or list(EXPORT_FORMATS)
    sheets = data.get("sheets")
    return ExtractConfig(
        source_directory=data["source_directory"],
        output_directory=data["output_directory"],
        # 保持顺序, 去重
        formats=tuple(dict.fromkeys(formats)),
        min_sheet_rows=data.get("min_sheet_rows", DEFAULT_MIN_SHEET_ROWS),
        default_task_number=data.get("default_task_number", DEFAULT_TASK_NUMBER),
        logs_directory=data.get("logs_directory", "./logs"),
        target_sheets=frozenset(sheets) if sheets else None,
    )
