"""Token infrastructure wiring: provider and refresh store per application."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from flask import Flask, current_app

from backoffice.core.config import validate_secrets
from backoffice.core.extensions import db, get_redis
from backoffice.infra.jwt import PyJWTTokenProvider
from backoffice.infra.redis import RedisRefreshTokenStore
from backoffice.infra.sqlalchemy import SQLAlchemyRefreshTokenStore
from backoffice.services._shared.ports import (
    InMemoryRefreshTokenStore,
    RefreshTokenStore,
    TokenProvider,
)

EXTENSION_KEY = "backoffice.auth"

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AuthComponents:
    tokens: PyJWTTokenProvider
    refresh_store: RefreshTokenStore


def build_refresh_store(app: Flask) -> RefreshTokenStore:
    """
    Select the refresh token store from ``REFRESH_TOKEN_STORE``.

    :raises RuntimeError: On an unknown backend name, or ``redis`` without a client.
    """
    backend = str(app.config.get("REFRESH_TOKEN_STORE", "sqlalchemy")).strip().lower()
    if backend == "sqlalchemy":
        return SQLAlchemyRefreshTokenStore(lambda: db.session)
    if backend == "redis":
        return RedisRefreshTokenStore(get_redis(app))
    if backend == "memory":
        return InMemoryRefreshTokenStore()
    raise RuntimeError(f"Unknown REFRESH_TOKEN_STORE: {backend!r}")


def init_app(app: Flask) -> None:
    """Validate JWT secrets and attach the provider and store to ``app.extensions``.

    Production refuses placeholder secrets; every environment refuses a
    shared access/refresh secret.
    """
    validate_secrets(app.config, strict=not (app.debug or app.testing))
    components = AuthComponents(
        tokens=PyJWTTokenProvider.from_config(app.config),
        refresh_store=build_refresh_store(app),
    )
    app.extensions[EXTENSION_KEY] = components
    log.info(
        "auth.initialized",
        extra={"event": "auth.initialized", "status": type(components.refresh_store).__name__},
    )


def _components() -> AuthComponents:
    try:
        return current_app.extensions[EXTENSION_KEY]
    except KeyError as exc:
        raise RuntimeError("Auth is not initialized; call core.auth.init_app first.") from exc


def get_token_provider() -> TokenProvider:
    return _components().tokens


def get_refresh_store() -> RefreshTokenStore:
    return _components().refresh_store
