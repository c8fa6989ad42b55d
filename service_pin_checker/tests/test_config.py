"""
Tests for PIN Checker configuration loading.
"""

from shared.config import get_config


def test_defaults(monkeypatch):
    for name in ("KRA_CONSUMER_KEY", "KRA_CONSUMER_SECRET", "PORT"):
        monkeypatch.delenv(name, raising=False)

    config = get_config("pin_checker", _env_file=None)

    assert config.service_name == "pin_checker"
    assert config.port == 3007
    assert config.kra_consumer_key is None
    assert config.lookup_timeout_seconds == 15.0
    assert config.token_timeout_seconds == 10.0
    assert config.soft_errors is True
    assert config.kra_pin_url == "https://sbx.kra.go.ke/checker/v1/pin"


def test_credentials_from_environment(monkeypatch):
    monkeypatch.setenv("KRA_CONSUMER_KEY", "env-key")
    monkeypatch.setenv("KRA_CONSUMER_SECRET", "env-secret")
    monkeypatch.setenv("PORT", "8099")

    config = get_config("pin_checker", _env_file=None)

    assert config.kra_consumer_key == "env-key"
    assert config.kra_consumer_secret == "env-secret"
    assert config.port == 8099


def test_prefixed_settings(monkeypatch):
    monkeypatch.setenv("PIN_CHECKER_SOFT_ERRORS", "false")
    monkeypatch.setenv("PIN_CHECKER_LOOKUP_TIMEOUT_SECONDS", "5")

    config = get_config("pin_checker", _env_file=None)

    assert config.soft_errors is False
    assert config.lookup_timeout_seconds == 5.0
