import logging

import pytest

from config import MODEL_NAME, Settings, load_settings
from log_config import setup_logging

ENV_VARS = (
    "OPENAI_API_KEY",
    "DEEPWITNESS_MODEL",
    "DEEPWITNESS_TEMPERATURE",
    "DEEPWITNESS_REPORT_TEMPERATURE",
    "DEEPWITNESS_REQUEST_TIMEOUT",
    "DEEPWITNESS_LOG_LEVEL",
    "DEEPWITNESS_LOG_FILE",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    settings = load_settings(dotenv=False)
    assert settings == Settings()
    assert settings.model_name == MODEL_NAME
    assert settings.temperature == 0.7
    assert settings.report_temperature == 0.2
    assert settings.log_file is None
    assert not settings.has_credentials


def test_reads_environment(clean_env):
    clean_env.setenv("OPENAI_API_KEY", "sk-test")
    clean_env.setenv("DEEPWITNESS_MODEL", "gpt-4o-mini")
    clean_env.setenv("DEEPWITNESS_TEMPERATURE", "0.4")
    clean_env.setenv("DEEPWITNESS_REQUEST_TIMEOUT", "15")
    clean_env.setenv("DEEPWITNESS_LOG_LEVEL", "debug")

    settings = load_settings(dotenv=False)

    assert settings.has_credentials
    assert settings.model_name == "gpt-4o-mini"
    assert settings.temperature == 0.4
    assert settings.request_timeout == 15.0
    assert settings.log_level == "DEBUG"


def test_empty_values_fall_back(clean_env):
    clean_env.setenv("OPENAI_API_KEY", "")
    clean_env.setenv("DEEPWITNESS_TEMPERATURE", " ")
    settings = load_settings(dotenv=False)
    assert settings.openai_api_key is None
    assert settings.temperature == 0.7


def test_bad_number(clean_env):
    clean_env.setenv("DEEPWITNESS_REPORT_TEMPERATURE", "warm")
    with pytest.raises(ValueError, match="DEEPWITNESS_REPORT_TEMPERATURE"):
        load_settings(dotenv=False)


def test_setup_logging_is_idempotent(restore_logging):
    setup_logging("DEBUG")
    logger = setup_logging("DEBUG")
    assert logger.level == logging.DEBUG
    assert len([h for h in logger.handlers if isinstance(h, logging.StreamHandler)]) == 1


def test_setup_logging_writes_file(restore_logging, tmp_path):
    log_file = tmp_path / "logs" / "deepwitness.log"
    setup_logging("INFO", str(log_file))

    logging.getLogger("deepwitness.game_engine").info("Session started")
    for handler in restore_logging.handlers:
        handler.flush()

    assert "Session started" in log_file.read_text(encoding="utf-8")
