import logging

import pytest

from pyrouter import ConfigError
from pyrouter.config import RouterSettings, configure_logging

ENV_VARS = (
    "PYROUTER_MODE",
    "PYROUTER_BASE",
    "PYROUTER_ORIGIN",
    "PYROUTER_HOST",
    "PYROUTER_PORT",
    "PYROUTER_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = RouterSettings.from_env(load_dotenv=False)
    assert settings == RouterSettings()
    assert settings.mode == "history"
    assert settings.initial_href == "http://127.0.0.1:8000/"


def test_values_from_environment(monkeypatch):
    monkeypatch.setenv("PYROUTER_MODE", " Hash ")
    monkeypatch.setenv("PYROUTER_ORIGIN", "https://example.com/")
    monkeypatch.setenv("PYROUTER_PORT", "9001")
    monkeypatch.setenv("PYROUTER_LOG_LEVEL", "debug")
    settings = RouterSettings.from_env(load_dotenv=False)
    assert settings.mode == "hash"
    assert settings.origin == "https://example.com"
    assert settings.port == 9001
    assert settings.log_level == "DEBUG"
    assert settings.mode_config.mode == "hash"


def test_base_only_applies_to_history_mode():
    assert RouterSettings(base="/app/").initial_href == "http://127.0.0.1:8000/app/"
    assert RouterSettings(mode="hash", base="/app").initial_href == "http://127.0.0.1:8000/"


def test_dotenv_file_is_loaded(monkeypatch, tmp_path):
    (tmp_path / ".env").write_text("PYROUTER_BASE=/portal\n")
    monkeypatch.chdir(tmp_path)
    settings = RouterSettings.from_env()
    assert settings.base == "/portal"


@pytest.mark.parametrize(
    "name, value",
    [
        ("PYROUTER_MODE", "memory"),
        ("PYROUTER_PORT", "http"),
        ("PYROUTER_PORT", "0"),
    ],
)
def test_invalid_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigError):
        RouterSettings.from_env(load_dotenv=False)


def test_configure_logging():
    logger = logging.getLogger("pyrouter")
    try:
        configure_logging("warning")
        assert logger.level == logging.WARNING
    finally:
        logger.setLevel(logging.NOTSET)
    with pytest.raises(ConfigError):
        configure_logging("chatty")
