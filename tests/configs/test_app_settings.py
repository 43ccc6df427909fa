"""
Test suite for application-level settings.

System role: Verification of FILESHARE_ environment handling
"""

import pytest
from pydantic import ValidationError

from fileshare.configs.base import AppSettings
from fileshare.configs.settings import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    for name in ("FILESHARE_ENVIRONMENT", "FILESHARE_DEBUG", "FILESHARE_LOG_LEVEL", "FILESHARE_CORS_ORIGINS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def test_defaults() -> None:
    settings = AppSettings()

    assert settings.environment == "development"
    assert settings.log_level == "INFO"
    assert settings.cors_origins == ["*"]
    assert not settings.is_production


def test_reads_prefixed_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FILESHARE_ENVIRONMENT", "production")
    monkeypatch.setenv("FILESHARE_LOG_LEVEL", "debug")
    monkeypatch.setenv("FILESHARE_CORS_ORIGINS", '["https://app.example"]')

    settings = Settings()

    assert settings.is_production
    assert settings.log_level == "DEBUG"
    assert settings.cors_origins == ["https://app.example"]


def test_unknown_log_level_is_rejected() -> None:
    with pytest.raises(ValidationError):
        AppSettings(log_level="chatty")


def test_unknown_environment_is_rejected() -> None:
    with pytest.raises(ValidationError):
        AppSettings(environment="qa")
