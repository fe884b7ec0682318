"""Tests for environment-driven settings."""

import pytest

from sales_app.config import DEFAULT_SEED_URL, Settings
from sales_app.exceptions import ConfigError


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test the settings used when nothing is configured."""
    for name in ["SALES_DATABASE_URL", "SEED_URL", "SEED_TIMEOUT", "API_PREFIX", "CORS_ORIGINS", "LOG_LEVEL"]:
        monkeypatch.delenv(name, raising=False)
    settings = Settings.from_env()
    assert settings.database_url == "sqlite:///./sales.db"
    assert settings.seed_url == DEFAULT_SEED_URL
    assert settings.seed_timeout == 10.0
    assert settings.api_prefix == "/api"
    assert settings.cors_origins == ["*"]
    assert settings.log_level == "INFO"


def test_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that environment variables override every default."""
    monkeypatch.setenv("SALES_DATABASE_URL", "postgresql://localhost/sales")
    monkeypatch.setenv("SEED_URL", "https://seed.example/data.json")
    monkeypatch.setenv("SEED_TIMEOUT", "2.5")
    monkeypatch.setenv("API_PREFIX", "/v1/")
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:3000, http://127.0.0.1:3000")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    settings = Settings.from_env()
    assert settings.database_url == "postgresql://localhost/sales"
    assert settings.seed_url == "https://seed.example/data.json"
    assert settings.seed_timeout == 2.5
    assert settings.api_prefix == "/v1"
    assert settings.cors_origins == ["http://localhost:3000", "http://127.0.0.1:3000"]
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("value", ["soon", "0", "-1"])
def test_invalid_timeout(monkeypatch: pytest.MonkeyPatch, value: str) -> None:
    """Test that a non-positive or non-numeric timeout is a configuration error."""
    monkeypatch.setenv("SEED_TIMEOUT", value)
    with pytest.raises(ConfigError, match="SEED_TIMEOUT"):
        Settings.from_env()
