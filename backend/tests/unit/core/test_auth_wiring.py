"""Tests for selecting the token provider and refresh store per app."""

from __future__ import annotations

import pytest
from backoffice.core.auth import build_refresh_store, get_refresh_store, get_token_provider
from backoffice.core.extensions import REDIS_EXTENSION_KEY, get_redis
from backoffice.infra.jwt import PyJWTTokenProvider
from backoffice.infra.redis import RedisRefreshTokenStore
from backoffice.infra.sqlalchemy import SQLAlchemyRefreshTokenStore
from backoffice.services._shared.ports import InMemoryRefreshTokenStore


def test_default_components(app):
    with app.app_context():
        assert isinstance(get_token_provider(), PyJWTTokenProvider)
        assert isinstance(get_refresh_store(), SQLAlchemyRefreshTokenStore)


def test_memory_store(app, monkeypatch):
    monkeypatch.setitem(app.config, "REFRESH_TOKEN_STORE", "memory")
    assert isinstance(build_refresh_store(app), InMemoryRefreshTokenStore)


def test_redis_store_uses_app_client(app, monkeypatch, fake_redis):
    monkeypatch.setitem(app.config, "REFRESH_TOKEN_STORE", "Redis")
    monkeypatch.setitem(app.extensions, REDIS_EXTENSION_KEY, fake_redis)

    store = build_refresh_store(app)

    assert isinstance(store, RedisRefreshTokenStore)
    assert store.r is fake_redis


def test_redis_store_without_url(app, monkeypatch):
    monkeypatch.setitem(app.config, "REFRESH_TOKEN_STORE", "redis")
    monkeypatch.delitem(app.extensions, REDIS_EXTENSION_KEY, raising=False)
    with pytest.raises(RuntimeError, match="REDIS_URL"):
        build_refresh_store(app)
    with pytest.raises(RuntimeError):
        get_redis(app)
