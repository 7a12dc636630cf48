"""
backoffice.services._shared.ports
=================================

Ports (hexagonal interfaces) for token management.

- :mod:`token_provider`: :class:`~.TokenProvider` plus the :class:`~.Identity`,
  :class:`~.AccessToken` and :class:`~.RefreshToken` value types.
- :mod:`refresh_token_store`: :class:`~.RefreshTokenStore`, the keyed
  single-record-per-user store, and its in-memory adapter.

Concrete adapters (PyJWT, SQLAlchemy, Redis) live under ``backoffice.infra``.
"""

from __future__ import annotations

from .refresh_token_store import (
    InMemoryRefreshTokenStore,
    RefreshRecord,
    RefreshTokenStore,
    as_utc,
)
from .token_provider import (
    AccessToken,
    Identity,
    RefreshToken,
    TokenProvider,
    strip_volatile_claims,
)

__all__ = [
    "AccessToken",
    "Identity",
    "InMemoryRefreshTokenStore",
    "RefreshRecord",
    "RefreshToken",
    "RefreshTokenStore",
    "TokenProvider",
    "as_utc",
    "strip_volatile_claims",
]
