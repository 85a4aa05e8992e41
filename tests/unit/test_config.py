import logging

import pytest
from pydantic import ValidationError

from patternlab.config.settings import Settings, configure_logging


def test_settings_defaults(monkeypatch) -> None:
    monkeypatch.delenv("STRICT_TRANSITIONS", raising=False)
    monkeypatch.delenv("TRANSITION_LOG_PATH", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    settings = Settings()
    assert settings.APP_NAME == "patternlab"
    assert settings.LOG_LEVEL == "INFO"
    assert settings.STRICT_TRANSITIONS is False
    assert settings.TRANSITION_LOG_PATH is None


def test_settings_env_overrides(monkeypatch) -> None:
    monkeypatch.setenv("STRICT_TRANSITIONS", " Strict ")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("TRANSITION_LOG_PATH", "data/logs/transitions.jsonl")

    settings = Settings()
    assert settings.STRICT_TRANSITIONS is True
    assert settings.LOG_LEVEL == "DEBUG"
    assert settings.TRANSITION_LOG_PATH == "data/logs/transitions.jsonl"


def test_init_kwargs_take_precedence_over_env(monkeypatch) -> None:
    monkeypatch.setenv("STRICT_TRANSITIONS", "on")

    settings = Settings(STRICT_TRANSITIONS=False)
    assert settings.STRICT_TRANSITIONS is False


def test_blank_transition_log_path_is_none(monkeypatch) -> None:
    monkeypatch.setenv("TRANSITION_LOG_PATH", "   ")
    assert Settings().TRANSITION_LOG_PATH is None


def test_invalid_strict_value_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(STRICT_TRANSITIONS="sometimes")


def test_invalid_log_level_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(LOG_LEVEL="chatty")


def test_configure_logging_sets_package_level() -> None:
    package_logger = logging.getLogger("patternlab")
    previous = package_logger.level
    try:
        configure_logging(Settings(LOG_LEVEL="warning"))
        assert package_logger.level == logging.WARNING
    finally:
        package_logger.setLevel(previous)
