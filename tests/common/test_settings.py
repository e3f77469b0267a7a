import pytest

from config import get_settings_module, load_settings


def test_app_env_aliases(monkeypatch):
    monkeypatch.setenv("APP_ENV", "Prod")
    assert get_settings_module() == "config.production"

    monkeypatch.delenv("APP_ENV")
    assert get_settings_module() == "config.development"
    assert get_settings_module("test") == "config.testing"


def test_unknown_environment_is_rejected(monkeypatch):
    monkeypatch.setenv("APP_ENV", "staging")

    with pytest.raises(ValueError, match="staging"):
        get_settings_module()


def test_load_settings_returns_module():
    settings = load_settings("testing")

    assert settings.TESTING is True
    assert settings.AUTO_INIT_DB is False
