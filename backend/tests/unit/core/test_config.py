"""Unit tests for configuration helpers and secret validation."""

from __future__ import annotations

from datetime import timedelta

import pytest
from backoffice.core.config import (
    BaseConfig,
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    env_bool,
    env_seconds,
    get_config,
    validate_secrets,
)
from backoffice.factory import create_app


@pytest.mark.parametrize("raw,expected", [("1", True), ("yes", True), ("On", True), ("0", False), ("nope", False)])
def test_env_bool(monkeypatch, raw, expected):
    monkeypatch.setenv("SOME_FLAG", raw)
    assert env_bool("SOME_FLAG") is expected


def test_env_bool_default(monkeypatch):
    monkeypatch.delenv("SOME_FLAG", raising=False)
    assert env_bool("SOME_FLAG", True) is True


def test_env_seconds(monkeypatch):
    monkeypatch.setenv("SOME_TTL", "90")
    assert env_seconds("SOME_TTL", timedelta(days=1)) == timedelta(seconds=90)
    monkeypatch.setenv("SOME_TTL", " ")
    assert env_seconds("SOME_TTL", timedelta(days=1)) == timedelta(days=1)


def test_default_lifetimes():
    assert BaseConfig.JWT_ACCESS_EXPIRES == timedelta(days=3)
    assert BaseConfig.JWT_REFRESH_EXPIRES == timedelta(days=7)
    assert BaseConfig.AUTH_ACCESS_COOKIE_MAX_AGE == timedelta(days=1)


@pytest.mark.parametrize(
    "name,cls",
    [("development", DevelopmentConfig), ("testing", TestingConfig), ("production", ProductionConfig), ("bogus", DevelopmentConfig)],
)
def test_get_config(monkeypatch, name, cls):
    monkeypatch.setenv("APP_ENV", name)
    assert get_config() is cls


def test_validate_secrets_accepts_distinct_values():
    validate_secrets({"JWT_ACCESS_SECRET": "a" * 32, "JWT_REFRESH_SECRET": "b" * 32}, strict=True)


def test_validate_secrets_rejects_shared_secret():
    with pytest.raises(RuntimeError, match="differ"):
        validate_secrets({"JWT_ACCESS_SECRET": "same", "JWT_REFRESH_SECRET": "same"}, strict=False)


def test_validate_secrets_rejects_missing_secret():
    with pytest.raises(RuntimeError, match="must be set"):
        validate_secrets({"JWT_ACCESS_SECRET": "a", "JWT_REFRESH_SECRET": ""}, strict=False)


def test_validate_secrets_placeholders_only_rejected_when_strict():
    cfg = {"JWT_ACCESS_SECRET": "CHANGE_ME_ACCESS", "JWT_REFRESH_SECRET": "CHANGE_ME_REFRESH"}
    validate_secrets(cfg, strict=False)
    with pytest.raises(RuntimeError, match="placeholder"):
        validate_secrets(cfg, strict=True)


def test_create_app_refuses_shared_secrets():
    class SharedSecretConfig(TestingConfig):
        JWT_ACCESS_SECRET = "shared"
        JWT_REFRESH_SECRET = "shared"

    with pytest.raises(RuntimeError):
        create_app(SharedSecretConfig)


def test_create_app_refuses_placeholders_in_production():
    class PlaceholderProdConfig(ProductionConfig):
        SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
        REDIS_URL = None
        JWT_ACCESS_SECRET = "CHANGE_ME_ACCESS"
        JWT_REFRESH_SECRET = "CHANGE_ME_REFRESH"

    with pytest.raises(RuntimeError, match="placeholder"):
        create_app(PlaceholderProdConfig)


def test_create_app_rejects_unknown_store():
    class UnknownStoreConfig(TestingConfig):
        REFRESH_TOKEN_STORE = "cassandra"

    with pytest.raises(RuntimeError, match="REFRESH_TOKEN_STORE"):
        create_app(UnknownStoreConfig)
