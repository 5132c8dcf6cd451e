"""Tests for the configuration model."""

from __future__ import annotations

from datetime import timedelta

import pytest
from pydantic import ValidationError
from safir.logging import LogLevel

from dnlookup.config import Config
from dnlookup.constants import USER_CACHE_LIFETIME, USER_CACHE_SIZE

from .support.config import config_path


def test_config() -> None:
    config = Config.from_file(config_path("keycloak"))
    assert config.keycloak.base_url == "https://keycloak.example.com"
    assert config.keycloak.realm == "example"
    assert config.keycloak.client_id == "dnlookup"
    secret = config.keycloak.client_secret.get_secret_value()
    assert secret == "some-client-secret"
    assert config.keycloak.token_url == (
        "https://keycloak.example.com/realms/example/protocol"
        "/openid-connect/token"
    )
    assert config.keycloak.admin_url == (
        "https://keycloak.example.com/admin/realms/example"
    )
    assert config.log_level == LogLevel.INFO
    assert config.cache_lifetime == timedelta(minutes=10)
    assert config.cache_lifetime_seconds == 600
    assert config.cache_size == 100


def test_config_defaults() -> None:
    config = Config.from_file(config_path("minimal"))
    assert config.keycloak.base_url == "https://keycloak.example.com"
    assert config.log_level == LogLevel.INFO
    assert config.cache_lifetime == USER_CACHE_LIFETIME
    assert config.cache_size == USER_CACHE_SIZE


def test_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DNLOOKUP_KEYCLOAK_CLIENT_SECRET", "other-secret")
    monkeypatch.setenv("DNLOOKUP_LOG_LEVEL", "DEBUG")
    config = Config.from_file(config_path("keycloak"))
    secret = config.keycloak.client_secret.get_secret_value()
    assert secret == "other-secret"
    assert config.log_level == LogLevel.DEBUG


def test_config_default_path(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DNLOOKUP_CONFIG_PATH", str(config_path("keycloak")))
    config = Config.from_default_path()
    assert config == Config.from_file(config_path("keycloak"))
    assert config.cache_size == 100

    monkeypatch.setenv("DNLOOKUP_CONFIG_PATH", str(config_path("minimal")))
    assert Config.from_default_path().cache_size == USER_CACHE_SIZE


def test_config_invalid() -> None:
    with pytest.raises(ValidationError):
        Config.model_validate(
            {
                "keycloak": {
                    "url": "https://keycloak.example.com",
                    "realm": "example",
                    "clientId": "dnlookup",
                    "clientSecret": "secret",
                    "unknown": "x",
                }
            }
        )
