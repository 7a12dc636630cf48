"""Factory Boy base wired to the application's scoped session.

``conftest`` binds the session per test with :func:`bind_session`; factories
resolve it lazily so they always write through the session that application
code reads from.
"""

from __future__ import annotations

import factory

_bound_session = None


def bind_session(session) -> None:
    """Make ``session`` the target of every factory (``None`` unbinds)."""
    global _bound_session
    _bound_session = session


def current_session():
    """
    :raises RuntimeError: When a factory runs outside the ``session`` fixture.
    """
    if _bound_session is None:
        raise RuntimeError("No session bound for factories; request the 'session' fixture.")
    return _bound_session


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    class Meta:
        abstract = True
        sqlalchemy_session_factory = current_session
        # Read-only units of work roll back on exit; committed rows survive it.
        sqlalchemy_session_persistence = "commit"
