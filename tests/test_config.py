"""Tests for centralized Config class."""
import importlib
import warnings

import pytest

from runhare import config as config_module


ENV_KEYS = (
    "RUNHARE_BASE_URL",
    "RUNHARE_NAMESPACE",
    "RUNHARE_SECRET",
    "RUNHARE_ORIGIN",
    "RUNHARE_TTL_MS",
    "RUNHARE_HTTP_TIMEOUT",
    "RUNHARE_HTTP_CONNECT_TIMEOUT",
    "RUNHARE_REJECT_UNREGISTERED",
    "ENVIRONMENT",
)


@pytest.fixture
def reload_config(monkeypatch):
    """Reload the config module under a controlled environment."""

    def _reload(**env):
        for key in ENV_KEYS:
            monkeypatch.delenv(key, raising=False)
        for key, value in env.items():
            monkeypatch.setenv(key, value)
        return importlib.reload(config_module).Config

    yield _reload

    monkeypatch.undo()
    importlib.reload(config_module)


def test_config_defaults(reload_config):
    """Verify default configuration values."""
    Config = reload_config()

    assert Config.BASE_URL == "https://harex.in"
    assert Config.TTL_MS == 2000
    assert Config.SECRET == ""
    assert Config.NAMESPACE == ""
    assert Config.HTTP_TIMEOUT == 10
    assert Config.REJECT_UNREGISTERED_MESSAGES is False


def test_config_env_overrides(reload_config):
    Config = reload_config(
        RUNHARE_BASE_URL="http://localhost:8080",
        RUNHARE_NAMESPACE="orders",
        RUNHARE_SECRET="s" * 40,
        RUNHARE_ORIGIN="billing",
        RUNHARE_TTL_MS="5000",
        RUNHARE_REJECT_UNREGISTERED="true",
    )

    assert Config.BASE_URL == "http://localhost:8080"
    assert Config.NAMESPACE == "orders"
    assert Config.ORIGIN == "billing"
    assert Config.TTL_MS == 5000
    assert Config.REJECT_UNREGISTERED_MESSAGES is True
    assert Config.validate() is True


def test_config_invalid_ttl_env(monkeypatch):
    monkeypatch.setenv("RUNHARE_TTL_MS", "soon")

    with pytest.raises(ValueError, match="RUNHARE_TTL_MS"):
        importlib.reload(config_module)

    monkeypatch.delenv("RUNHARE_TTL_MS")
    importlib.reload(config_module)


def test_config_validation_warns_on_empty_secret(reload_config):
    Config = reload_config()

    with pytest.warns(UserWarning, match="RUNHARE_SECRET not set"):
        assert Config.validate() is True


def test_config_validation_warns_on_short_secret(reload_config):
    Config = reload_config(RUNHARE_SECRET="short")

    with pytest.warns(UserWarning, match="only 5 characters"):
        Config.validate()


def test_config_validation_requires_secret_in_production(reload_config):
    Config = reload_config(ENVIRONMENT="production")

    with pytest.raises(ValueError, match="RUNHARE_SECRET must be set in production"):
        Config.validate()


def test_config_validation_collects_errors(reload_config):
    Config = reload_config(
        RUNHARE_SECRET="s" * 40,
        RUNHARE_TTL_MS="0",
        RUNHARE_BASE_URL="ftp://example.com",
    )

    with warnings.catch_warnings():
        warnings.simplefilter("error")
        with pytest.raises(ValueError) as exc_info:
            Config.validate()

    message = str(exc_info.value)
    assert "TTL_MS must be > 0" in message
    assert "BASE_URL must be an http(s) URL" in message
