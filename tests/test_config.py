import io
import json
import logging

import pytest
from pydantic import ValidationError

from services.config import Environment, Settings, get_settings
from services.logging_config import JSONFormatter, configure_from_settings, configure_logging


@pytest.fixture
def restore_vendorlink_logger():
    logger = logging.getLogger("vendorlink")
    handlers, level = list(logger.handlers), logger.level
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)


def test_defaults():
    settings = Settings(_env_file=None)
    assert settings.retry_attempts == 3
    assert settings.retry_base_delay_seconds == 1.0
    assert settings.sync_batch_size == 100
    assert settings.demo_fallback_enabled is False
    assert settings.is_development
    assert settings.json_logs


def test_environment_variables_use_prefix(monkeypatch):
    monkeypatch.setenv("VENDORLINK_ENVIRONMENT", "production")
    monkeypatch.setenv("VENDORLINK_RETRY_ATTEMPTS", "5")
    monkeypatch.setenv("VENDORLINK_DEMO_FALLBACK_ENABLED", "true")
    monkeypatch.setenv("RETRY_ATTEMPTS", "9")

    settings = Settings(_env_file=None)
    assert settings.environment == Environment.PRODUCTION
    assert settings.is_production
    assert settings.retry_attempts == 5
    assert settings.demo_fallback_enabled


def test_validators():
    assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"
    assert Settings(_env_file=None, log_format="TEXT").json_logs is False
    with pytest.raises(ValidationError):
        Settings(_env_file=None, log_level="verbose")
    with pytest.raises(ValidationError):
        Settings(_env_file=None, log_format="xml")
    with pytest.raises(ValidationError):
        Settings(_env_file=None, sync_batch_size=0)


def test_get_settings_is_cached():
    get_settings.cache_clear()
    try:
        assert get_settings() is get_settings()
    finally:
        get_settings.cache_clear()


def test_json_logging(restore_vendorlink_logger):
    stream = io.StringIO()
    configure_logging("INFO", json_format=True, stream=stream)

    logger = logging.getLogger("vendorlink.connectors.test")
    logger.debug("hidden")
    logger.info("Synced inventory", extra={"vendor_id": "v-1", "connector": "ingram_micro"})

    lines = stream.getvalue().strip().splitlines()
    assert len(lines) == 1
    record = json.loads(lines[0])
    assert record["level"] == "INFO"
    assert record["logger"] == "vendorlink.connectors.test"
    assert record["message"] == "Synced inventory"
    assert record["vendor_id"] == "v-1"
    assert record["connector"] == "ingram_micro"
    assert "tenant_id" not in record


def test_json_logging_includes_exceptions(restore_vendorlink_logger):
    stream = io.StringIO()
    configure_logging("ERROR", stream=stream)
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        logging.getLogger("vendorlink.x").exception("failed")

    record = json.loads(stream.getvalue())
    assert record["error"] == "boom"
    assert "RuntimeError" in record["traceback"]


def test_configure_from_settings_text_format(restore_vendorlink_logger):
    configure_from_settings(Settings(_env_file=None, log_level="warning", log_format="text"))
    logger = restore_vendorlink_logger
    assert logger.level == logging.WARNING
    assert len(logger.handlers) == 1
    assert not isinstance(logger.handlers[0].formatter, JSONFormatter)
    assert logging.getLogger("paramiko").level == logging.WARNING
