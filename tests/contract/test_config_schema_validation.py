from __future__ import annotations

import json
import pathlib

import jsonschema
import pytest
import yaml
from jsonschema.exceptions import ValidationError

from tasksheet.config.loader import SCHEMA_PATH

"""Config schema contract test."""

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[2]


def _schema() -> dict:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def test_schema_is_valid_draft_2020_12():
    jsonschema.Draft202012Validator.check_schema(_schema())


def test_config_schema_valid_example():
    config = {
        "source_directory": "./data",
        "output_directory": "./output",
        "formats": ["json", "template"],
        "sheets": ["日冻结", "曲线"],
        "min_sheet_rows": 10,
        "default_task_number": 45,
        "logs_directory": "./logs",
    }
    jsonschema.validate(config, _schema())


def test_shipped_config_is_valid():
    config = yaml.safe_load((PROJECT_ROOT / "config" / "extract.yml").read_text(encoding="utf-8"))
    jsonschema.validate(config, _schema())


def test_config_schema_missing_required_key():
    with pytest.raises(ValidationError):
        jsonschema.validate({"source_directory": "./data"}, _schema())


def test_config_schema_rejects_extra_key():
    config = {"source_directory": "./data", "output_directory": "./out", "database": {}}
    with pytest.raises(ValidationError):
        jsonschema.validate(config, _schema())


def test_config_schema_rejects_empty_formats():
    config = {"source_directory": "./data", "output_directory": "./out", "formats": []}
    with pytest.raises(ValidationError):
        jsonschema.validate(config, _schema())
