from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol


def as_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime (naive values are assumed UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


@dataclass(frozen=True, slots=True)
class RefreshRecord:
    """
    Read-model for the single live refresh token of a user.

    :ivar user_id: Owner user id.
    :ivar token: Signed refresh token string (lookup key).
    :ivar expires_at: Absolute expiration (aware UTC).
    """

    user_id: str
    token: str
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        """A record is dead strictly after ``expires_at``."""
        return self.expires_at < as_utc(now)


class RefreshTokenStore(Protocol):
    """
    Keyed store holding at most one refresh token per user.

    Lookups are by exact token value, writes by exact user id. ``rotate`` MUST
    be atomic: it swaps the token only if the stored value still equals
    ``old_token``.
    """

    def upsert(self, user_id: str, token: str, expires_at: datetime) -> None:
        """Create or overwrite the record of ``user_id``."""

    def find_by_token(self, token: str) -> RefreshRecord | None:
        """Return the record whose current token is ``token``."""

    def delete_by_token(self, token: str) -> int:
        """Delete records holding ``token``. :returns: Rows removed (0 or 1)."""

    def delete_for_user(self, user_id: str) -> int:
        """Delete the record of ``user_id``. :returns: Rows removed (0 or 1)."""

    def rotate(self, user_id: str, old_token: str, new_token: str, expires_at: datetime) -> bool:
        """
        Compare-and-swap the token of ``user_id``.

        :returns: ``False`` when the stored token is no longer ``old_token``
            (already rotated, replaced by a new login, or deleted).
        """

    def purge_expired(self, now: datetime) -> int:
        """Delete every record with ``expires_at < now``. :returns: Rows removed."""


class InMemoryRefreshTokenStore(RefreshTokenStore):
    """
    Dict-backed store for unit tests.

    .. note::
       A single lock makes every operation, ``rotate`` included, atomic.
    """

    def __init__(self) -> None:
        self._by_user: dict[str, RefreshRecord] = {}
        self._lock = threading.Lock()

    def upsert(self, user_id: str, token: str, expires_at: datetime) -> None:
        with self._lock:
            self._by_user[user_id] = RefreshRecord(user_id, token, as_utc(expires_at))

    def find_by_token(self, token: str) -> RefreshRecord | None:
        with self._lock:
            return next((r for r in self._by_user.values() if r.token == token), None)

    def delete_by_token(self, token: str) -> int:
        with self._lock:
            owners = [uid for uid, r in self._by_user.items() if r.token == token]
            for uid in owners:
                del self._by_user[uid]
            return len(owners)

    def delete_for_user(self, user_id: str) -> int:
        with self._lock:
            return 1 if self._by_user.pop(user_id, None) is not None else 0

    def rotate(self, user_id: str, old_token: str, new_token: str, expires_at: datetime) -> bool:
        with self._lock:
            current = self._by_user.get(user_id)
            if current is None or current.token != old_token:
                return False
            self._by_user[user_id] = RefreshRecord(user_id, new_token, as_utc(expires_at))
            return True

    def purge_expired(self, now: datetime) -> int:
        with self._lock:
            dead = [uid for uid, r in self._by_user.items() if r.is_expired(now)]
            for uid in dead:
                del self._by_user[uid]
            return len(dead)

    def __len__(self) -> int:
        return len(self._by_user)
