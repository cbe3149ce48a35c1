"""Tests for environment-driven settings and the app factory overrides."""

from datetime import timedelta

import pytest

from app import create_app
from config import DEFAULT_BACKEND_URL, DEFAULT_PORT, ConfigError, Settings


def test_defaults() -> None:
    settings = Settings.from_env({})
    assert settings.port == DEFAULT_PORT
    assert settings.database == "typing_test.db"
    assert settings.backend_url == DEFAULT_BACKEND_URL
    assert settings.token_ttl == timedelta(days=7)


def test_environment_values() -> None:
    settings = Settings.from_env(
        {
            "PORT": "8080",
            "TYPETEST_DATABASE": ":memory:",
            "TYPETEST_SECRET_KEY": "abc",
            "TYPETEST_TOKEN_TTL_MINUTES": "30",
            "TYPETEST_BACKEND_URL": "https://typing.example.com/",
            "TYPETEST_TOKEN_FILE": "/tmp/token.json",
        }
    )
    assert settings.port == 8080
    assert settings.database == ":memory:"
    assert settings.secret_key == "abc"
    assert settings.token_ttl == timedelta(minutes=30)
    assert settings.backend_url == "https://typing.example.com"
    assert settings.token_file == "/tmp/token.json"


def test_empty_values_use_defaults() -> None:
    assert Settings.from_env({"PORT": ""}).port == DEFAULT_PORT


@pytest.mark.parametrize(
    "env",
    [
        {"PORT": "not-a-number"},
        {"PORT": "70000"},
        {"TYPETEST_TOKEN_TTL_MINUTES": "0"},
        {"TYPETEST_BACKEND_URL": "ftp://example.com"},
    ],
)
def test_invalid_values(env: dict) -> None:
    with pytest.raises(ConfigError):
        Settings.from_env(env)


def test_create_app_reads_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    db_file = tmp_path / "env.db"
    monkeypatch.setenv("TYPETEST_DATABASE", str(db_file))
    monkeypatch.setenv("TYPETEST_TOKEN_TTL_MINUTES", "15")
    app = create_app({"TESTING": True})
    try:
        services = app.extensions["typetest_services"]
        assert app.config["DATABASE"] == str(db_file)
        assert services.tokens.ttl == timedelta(minutes=15)
        assert db_file.exists()
    finally:
        app.extensions["typetest_services"].db_manager.close()
