import pytest
from pydantic import ValidationError

from irrf_api.config import DEFAULT_CORS_ORIGINS, Settings, get_settings


def test_defaults(monkeypatch):
    for key in ("IRRF_CORS_ORIGINS", "IRRF_INCLUDE_TRACE", "PORT", "IRRF_LOG_TO_FILE"):
        monkeypatch.delenv(key, raising=False)
    settings = Settings()
    assert settings.cors_origins == DEFAULT_CORS_ORIGINS
    assert settings.include_trace is True
    assert settings.port == 3000
    assert settings.log_to_file is False


def test_env_parsing(monkeypatch):
    monkeypatch.setenv("IRRF_CORS_ORIGINS", "https://a.example/, https://b.example")
    monkeypatch.setenv("IRRF_INCLUDE_TRACE", "no")
    monkeypatch.setenv("PORT", "8080")
    settings = get_settings()
    assert settings.cors_origins == ("https://a.example", "https://b.example")
    assert settings.include_trace is False
    assert settings.port == 8080


def test_settings_are_cached():
    assert get_settings() is get_settings()


def test_invalid_port_rejected(monkeypatch):
    monkeypatch.setenv("PORT", "70000")
    with pytest.raises(ValidationError):
        Settings()
