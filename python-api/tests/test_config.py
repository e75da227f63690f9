"""
Tests for configuration module.

Tests for:
- Environment variable loading
- Validation of log level and numeric bounds
- Default values
"""

import pytest
from pydantic import ValidationError


def test_config_loads_environment_variables(mock_env):
    from config import Settings

    settings = Settings()

    assert settings.ENVIRONMENT == "test"
    assert settings.LOG_LEVEL == "INFO"
    assert settings.ZERODB_PROJECT_ID == "test_project"


def test_config_has_default_values(monkeypatch):
    """
    Test that configuration has sensible default values.
    """
    for name in ("BCRYPT_ROUNDS", "LOGIN_RATE_LIMIT", "LOGIN_RATE_WINDOW"):
        monkeypatch.delenv(name, raising=False)

    from config import Settings

    settings = Settings(_env_file=None)

    assert settings.BCRYPT_ROUNDS == 12
    assert settings.LOGIN_RATE_LIMIT == 20
    assert settings.LOGIN_RATE_WINDOW == 60


def test_cors_origins_parsed_as_list(mock_env):
    from config import Settings

    settings = Settings()

    assert settings.cors_origins == ["http://localhost:3000", "http://localhost:5173"]


def test_log_level_is_normalised(monkeypatch):
    from config import Settings

    monkeypatch.setenv("LOG_LEVEL", "debug")

    assert Settings().LOG_LEVEL == "DEBUG"


def test_invalid_log_level_rejected(monkeypatch):
    from config import Settings

    monkeypatch.setenv("LOG_LEVEL", "LOUD")

    with pytest.raises(ValidationError):
        Settings()


def test_bcrypt_rounds_bounded(monkeypatch):
    from config import Settings

    monkeypatch.setenv("BCRYPT_ROUNDS", "3")

    with pytest.raises(ValidationError):
        Settings()
