# tests/test_config_and_logging.py
import json
import logging

import pytest
from pydantic import ValidationError

from costseg.adapters.config import AppConfig
from costseg.adapters.logging_utils import JsonLogFormatter, get_logger, log_event


def test_defaults():
    cfg = AppConfig()
    assert cfg.DEFAULT_TAX_RATE == 37.0
    assert cfg.DEFAULT_BONUS_RATE == 100.0
    assert cfg.SAVINGS_HORIZON_YEARS == 5


def test_env_overrides_and_percent_strings(monkeypatch):
    monkeypatch.setenv("COSTSEG_DEFAULT_TAX_RATE", "24%")
    monkeypatch.setenv("COSTSEG_SAVINGS_HORIZON_YEARS", "10")
    cfg = AppConfig()
    assert cfg.DEFAULT_TAX_RATE == 24.0
    assert cfg.SAVINGS_HORIZON_YEARS == 10


@pytest.mark.parametrize(
    "name,value",
    [("COSTSEG_DEFAULT_BONUS_RATE", "120"), ("COSTSEG_SAVINGS_HORIZON_YEARS", "0")],
)
def test_bad_env_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValidationError):
        AppConfig()


def test_json_formatter_merges_context():
    record = logging.LogRecord("costseg.test", logging.INFO, __file__, 1, "study_report_generated", None, None)
    record.context = {"npv_tax_savings": 123.45, "assets": 5}

    payload = json.loads(JsonLogFormatter().format(record))

    assert payload["message"] == "study_report_generated"
    assert payload["level"] == "INFO"
    assert payload["npv_tax_savings"] == 123.45
    assert payload["assets"] == 5


def test_get_logger_installs_one_handler():
    a = get_logger("costseg.test.once")
    b = get_logger("costseg.test.once")
    assert a is b
    assert len(a.handlers) == 1
    assert isinstance(a.handlers[0].formatter, JsonLogFormatter)


def test_log_event_passes_context(monkeypatch):
    logger = get_logger("costseg.test.event")
    seen = []
    monkeypatch.setattr(logger, "handle", seen.append)

    log_event(logger, "study_saved", study_id=7)

    assert seen[0].getMessage() == "study_saved"
    assert seen[0].context == {"study_id": 7}
