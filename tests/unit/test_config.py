# tests/unit/test_config.py
"""Tests for config loading and JSON logging."""

import json
import logging

import pytest
import yaml
from pydantic import ValidationError

from printify_check.config import get_config_path, load_config
from printify_check.config.schema import PrintifyCheckConfig
from printify_check.logging_config import JsonFormatter


def test_missing_file_is_created_with_defaults(tmp_path):
    path = tmp_path / "nested" / "config.yaml"

    config = load_config(path)

    assert path.exists()
    assert config == PrintifyCheckConfig()
    written = yaml.safe_load(path.read_text())
    assert written["polling"] == {"interval": 2.0, "timeout": 600.0}
    assert written["wizard"]["pro_or_team"] is False


def test_existing_file_overrides_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "api": {"base_url": "https://pdf.example.com/api"},
                "polling": {"interval": 0.5, "timeout": None},
                "wizard": {"pro_or_team": True},
                "legacy_section": {"ignored": True},
            }
        )
    )

    config = load_config(path)

    assert config.api.base_url == "https://pdf.example.com/api"
    assert config.api.timeout == 60.0
    assert config.polling.interval == 0.5
    assert config.polling.timeout is None
    assert config.wizard.pro_or_team is True
    assert config.wizard.default_standards == ["PDFA_1B", "PDFUA_1", "WCAG_2_1_AA"]


def test_empty_file_means_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert load_config(path) == PrintifyCheckConfig()


def test_json_formatter():
    record = logging.LogRecord(
        "printify_check.orchestrator.jobs", logging.WARNING, __file__, 1,
        "Remote cancel of job %s failed", ("p-1",), None,
    )

    data = json.loads(JsonFormatter().format(record))

    assert data["level"] == "WARNING"
    assert data["logger"] == "printify_check.orchestrator.jobs"
    assert data["msg"] == "Remote cancel of job p-1 failed"
    assert "ts" in data
    assert "exc" not in data


def test_json_formatter_lifts_job_context():
    record = logging.LogRecord(
        "printify_check.orchestrator.jobs", logging.INFO, __file__, 1, "Job v-1 completed", (), None,
    )
    record.job_id = "v-1"
    record.kind = "validate"

    data = json.loads(JsonFormatter().format(record))

    assert data["job_id"] == "v-1"
    assert data["kind"] == "validate"
    assert "step" not in data


def test_env_var_overrides_location(tmp_path, monkeypatch):
    target = tmp_path / "custom.yaml"
    monkeypatch.setenv("PRINTIFY_CHECK_CONFIG", str(target))

    assert get_config_path() == target
    load_config()
    assert target.exists()


def test_invalid_value_rejected(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"polling": {"interval": 0}}))

    with pytest.raises(ValidationError):
        load_config(path)
