import io
import logging

import pytest

from fintrack import logging_setup
from fintrack.config import DEFAULT_DATA_PATH, load_settings


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("FINTRACK_DATA_PATH", "FINTRACK_TIMEZONE", "FINTRACK_LOG_LEVEL", "FINTRACK_GRANULARITY"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    settings = load_settings(use_dotenv=False)
    assert settings.data_path == DEFAULT_DATA_PATH
    assert settings.timezone == "UTC"
    assert settings.default_granularity == "month"
    assert settings.tz.key == "UTC"


def test_reads_environment(clean_env):
    clean_env.setenv("FINTRACK_TIMEZONE", "Asia/Kolkata")
    clean_env.setenv("FINTRACK_GRANULARITY", "Week")
    clean_env.setenv("FINTRACK_DATA_PATH", "/tmp/tx.json")
    settings = load_settings(use_dotenv=False)
    assert settings.timezone == "Asia/Kolkata"
    assert settings.default_granularity == "week"
    assert settings.data_path == "/tmp/tx.json"


def test_rejects_unknown_timezone(clean_env):
    clean_env.setenv("FINTRACK_TIMEZONE", "Mars/Olympus")
    with pytest.raises(ValueError, match="FINTRACK_TIMEZONE"):
        load_settings(use_dotenv=False)


def test_rejects_unknown_granularity(clean_env):
    clean_env.setenv("FINTRACK_GRANULARITY", "fortnight")
    with pytest.raises(ValueError, match="FINTRACK_GRANULARITY"):
        load_settings(use_dotenv=False)


def test_configure_logging_once(monkeypatch):
    monkeypatch.setattr(logging_setup, "_CONFIGURED", False)
    pkg_logger = logging.getLogger("fintrack")
    saved = (list(pkg_logger.handlers), pkg_logger.level, pkg_logger.propagate)
    stream = io.StringIO()
    try:
        logging_setup.configure_logging("DEBUG", stream=stream)
        logging_setup.configure_logging("ERROR", stream=io.StringIO())
        logging_setup.get_logger("fintrack.pipeline").debug("recomputed %d", 3)
        assert "fintrack.pipeline DEBUG recomputed 3" in stream.getvalue()
    finally:
        pkg_logger.handlers[:] = saved[0]
        pkg_logger.setLevel(saved[1])
        pkg_logger.propagate = saved[2]
