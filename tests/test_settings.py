from __future__ import annotations

from lumo_tasks.core.config import Settings


def test_environment_profiles_apply_defaults() -> None:
    dev = Settings(environment="development")
    assert dev.log_level == "DEBUG"
    assert dev.reload is True
    assert dev.debug_errors is True

    test_profile = Settings(environment="test")
    assert test_profile.log_level == "WARNING"
    assert test_profile.reload is False

    prod = Settings(environment="production")
    assert prod.log_level == "INFO"
    assert prod.debug_errors is False


def test_environment_aliases_are_normalised() -> None:
    assert Settings(environment="PROD").environment == "production"
    assert Settings(environment="testing").environment == "test"


def test_profile_respects_explicit_overrides(monkeypatch) -> None:
    monkeypatch.setenv("LUMO_LOG_LEVEL", "error")
    assert Settings(environment="test").log_level == "ERROR"

    monkeypatch.setenv("LUMO_DEBUG_ERRORS", "true")
    assert Settings(environment="production").debug_errors is True


def test_comma_separated_cors_and_lifetimes(monkeypatch) -> None:
    monkeypatch.setenv("LUMO_CORS_ALLOW_ORIGINS", "https://a.example.com, https://b.example.com")
    settings = Settings(access_token_expire_minutes=0, frontend_base_url="https://front.example.com/")

    assert settings.cors_allow_origins == ["https://a.example.com", "https://b.example.com"]
    assert settings.access_token_expire_minutes == 1
    assert settings.frontend_base_url == "https://front.example.com"
