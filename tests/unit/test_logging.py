import json
import logging

import pytest
import structlog

from yc_kms_wrapping.logging import LOG_LEVEL_ENV, configure_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_configure_logging_emits_json(capsys, restore_logging) -> None:
    configure_logging("debug")
    structlog.get_logger("yc_kms_wrapping.tests").info("kms wrapper configured", key_id="abj-key")
    line = capsys.readouterr().err.strip().splitlines()[-1]
    record = json.loads(line)
    assert record["msg"] == "kms wrapper configured"
    assert record["component"] == "yc_kms_wrapping.tests"
    assert record["level"] == "info"
    assert record["key_id"] == "abj-key"
    assert "ts" in record


def test_level_from_environment(capsys, monkeypatch, restore_logging) -> None:
    monkeypatch.setenv(LOG_LEVEL_ENV, "warning")
    configure_logging()
    log = structlog.get_logger("yc_kms_wrapping.tests")
    log.info("hidden")
    log.warning("shown")
    err = capsys.readouterr().err
    assert "hidden" not in err
    assert "shown" in err
