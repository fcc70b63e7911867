"""
tests/test_config.py -- Unit tests for core/config.py.

Covers:
  - Production mode without SECRET_KEY refuses to load (ConfigurationError
    from get_settings())
  - Keys shorter than 32 characters are rejected in every mode
  - Debug mode generates a usable key
  - Token lifetime and bcrypt cost bounds

Every test that touches get_settings() clears the lru_cache afterwards so the
rest of the suite keeps seeing the DEBUG=true settings from conftest.py.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from core.config import Settings, get_settings
from core.errors import ConfigurationError


@pytest.fixture
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_missing_secret_key_in_production_raises(monkeypatch, fresh_settings):
    monkeypatch.setenv("DEBUG", "false")
    monkeypatch.delenv("SECRET_KEY", raising=False)
    with pytest.raises(ConfigurationError) as exc_info:
        get_settings()
    assert "SECRET_KEY" in str(exc_info.value)


def test_short_secret_key_raises(monkeypatch, fresh_settings):
    monkeypatch.setenv("DEBUG", "false")
    monkeypatch.setenv("SECRET_KEY", "too-short")
    with pytest.raises(ConfigurationError):
        get_settings()


def test_valid_secret_key_loads(monkeypatch, fresh_settings):
    key = "k" * 48
    monkeypatch.setenv("DEBUG", "false")
    monkeypatch.setenv("SECRET_KEY", key)
    assert get_settings().secret_key == key


def test_debug_mode_generates_key():
    settings = Settings(debug=True, secret_key="")
    assert len(settings.secret_key) >= 32


def test_generated_keys_differ_between_instances():
    assert Settings(debug=True, secret_key="").secret_key != Settings(debug=True, secret_key="").secret_key


def test_short_key_rejected_even_in_debug():
    with pytest.raises(ValidationError):
        Settings(debug=True, secret_key="short")


@pytest.mark.parametrize("field,value", [("token_expire_seconds", 0), ("bcrypt_rounds", 3), ("bcrypt_rounds", 32)])
def test_out_of_range_values_rejected(field, value):
    with pytest.raises(ValidationError):
        Settings(debug=True, **{field: value})


def test_defaults(monkeypatch):
    monkeypatch.delenv("BCRYPT_ROUNDS", raising=False)
    monkeypatch.delenv("TOKEN_EXPIRE_SECONDS", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    settings = Settings(debug=True)
    assert settings.token_expire_seconds == 3600
    assert settings.bcrypt_rounds == 12
    assert settings.database_url.startswith("sqlite:///")
