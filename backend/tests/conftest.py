"""Pytest fixtures for the application, its database and an HTTP client.

The schema is created and dropped around every test on an in-memory SQLite
database. Application code commits (the refresh token store does so on every
call), so tests get a fresh schema instead of a rolled-back transaction.
"""

from __future__ import annotations

import os

import fakeredis
import pytest
from backoffice.core.config import TestingConfig
from backoffice.core.extensions import db as _db  # Flask-SQLAlchemy instance
from backoffice.factory import create_app  # application factory under test


class TestConfig(TestingConfig):
    """Testing configuration for creating the Flask app.

    Notes
    -----
    - Uses an in-memory SQLite database for speed.
    - Keeps ``Secure`` cookies so attribute assertions match production.
    - Avoids hitting external services (no Redis URL).
    """

    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    AUTH_COOKIE_SECURE = True
    AUTH_COOKIE_SAMESITE = "Strict"
    LOG_LEVEL = "WARNING"


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application instance with :class:`TestConfig` applied.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    os.environ.pop("REDIS_URL", None)
    app = create_app(TestConfig)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture()
def db(app):
    """Create all tables inside a pushed application context.

    Yields
    ------
    flask_sqlalchemy.SQLAlchemy
        Database extension bound to the testing application.
    """
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def session(db):
    """Return the scoped session used by application code."""
    return db.session


@pytest.fixture()
def client(app, db):
    """Flask test client without a cookie jar; tests send ``Cookie`` headers explicitly."""
    return app.test_client(use_cookies=False)


@pytest.fixture()
def runner(app, db):
    """Click runner for the ``flask`` CLI groups."""
    return app.test_cli_runner()


@pytest.fixture
def fake_redis():
    """Provide a fresh FakeRedis instance for each test."""
    r = fakeredis.FakeRedis()
    r.flushall()
    return r


# -- Hook up Factory Boy to the application session ----------------------------
@pytest.fixture(autouse=True)
def _factories_session(session):
    """Wire Factory Boy's session helper to the session fixture."""
    from tests.factories import bind_session

    bind_session(session)
    yield
    bind_session(None)
