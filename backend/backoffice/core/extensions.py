"""Extension singletons (database, migrations) and the optional Redis connection."""

from __future__ import annotations

import redis  # type: ignore[import-untyped]
from flask import Flask, current_app
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import MetaData

REDIS_EXTENSION_KEY = "redis_client"

# Constraint names are part of the schema contract: migrations and the
# service layer's conflict detection refer to them.
metadata = MetaData(
    naming_convention={
        "ix": "ix_%(table_name)s_%(column_0_name)s",
        "uq": "uq_%(table_name)s_%(column_0_name)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)


def connect_redis(url: str) -> redis.Redis:
    """Open a client for ``url`` and fail fast when the server is unreachable.

    :raises RuntimeError: When ``PING`` fails.
    """
    client = redis.Redis.from_url(url)
    try:
        client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {url!r}") from exc
    return client


def init_app(app: Flask) -> None:
    """Bind the database and migrations to ``app``; connect Redis when configured.

    Parameters
    ----------
    app: flask.Flask
        Application being built. Models are imported here so Alembic
        autogenerate sees the full metadata.

    Notes
    -----
    The Redis client lives in ``app.extensions`` rather than a module global,
    so several apps (one per test config, for instance) never share it.
    """
    db.init_app(app)

    from backoffice import models as _models  # noqa: F401

    migrate.init_app(app, db)

    redis_url = app.config.get("REDIS_URL")
    if redis_url:
        app.extensions[REDIS_EXTENSION_KEY] = connect_redis(redis_url)
    else:
        app.extensions.pop(REDIS_EXTENSION_KEY, None)


def get_redis(app: Flask | None = None) -> redis.Redis:
    """Return the Redis client of ``app`` (default: the current app).

    :raises RuntimeError: When ``REDIS_URL`` was not configured.
    """
    target = app if app is not None else current_app
    client = target.extensions.get(REDIS_EXTENSION_KEY)
    if client is None:
        raise RuntimeError("Redis is not configured. Set REDIS_URL to use the redis store.")
    return client
