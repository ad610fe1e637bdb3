from unittest.mock import patch

import pytest

from shortlink.config import DEFAULT_TIMEOUT, ConfigError, ShortenerConfig, load_config

_VARS = ("SHORTENER_BASE_URL", "SUPABASE_URL", "SUPABASE_ANON_KEY", "SHORTENER_TIMEOUT", "LOG_LEVEL")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


@patch("shortlink.config.load_dotenv")
def test_load_config_defaults(_) -> None:
    config = load_config()
    assert config.base_url == ""
    assert config.timeout == DEFAULT_TIMEOUT
    assert config.log_level == "INFO"
    assert config.provider_is_configured() is False


@patch("shortlink.config.load_dotenv")
def test_load_config_from_environment(_, monkeypatch) -> None:
    monkeypatch.setenv("SHORTENER_BASE_URL", "https://api.example")
    monkeypatch.setenv("SUPABASE_URL", "https://project.supabase.co")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon-key")
    monkeypatch.setenv("SHORTENER_TIMEOUT", "2.5")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    config = load_config()

    assert config.base_url == "https://api.example"
    assert config.timeout == 2.5
    assert config.log_level == "DEBUG"
    assert config.provider_is_configured() is True


@pytest.mark.parametrize("raw", ["abc", "0", "-1"])
@patch("shortlink.config.load_dotenv")
def test_invalid_timeout_is_rejected(_, raw, monkeypatch) -> None:
    monkeypatch.setenv("SHORTENER_TIMEOUT", raw)
    with pytest.raises(ConfigError):
        load_config()


def test_placeholder_credentials_are_not_configured() -> None:
    config = ShortenerConfig(
        base_url="https://api.example",
        supabase_url="https://project.supabase.co",
        supabase_key="VOTRE_SUPABASE_ANON_KEY",
    )
    assert config.provider_is_configured() is False
