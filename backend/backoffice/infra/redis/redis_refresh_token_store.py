# comments in English; reST docstrings
from __future__ import annotations

import hashlib
import math
from dataclasses import dataclass
from datetime import UTC, datetime

import redis  # type: ignore[import-untyped]

from backoffice.services._shared.ports import RefreshRecord, RefreshTokenStore, as_utc


def _s(value: bytes | str | None) -> str | None:
    if value is None:
        return None
    return value.decode() if isinstance(value, bytes | bytearray) else str(value)


@dataclass(slots=True)
class RedisRefreshTokenStore(RefreshTokenStore):
    """
    Redis-backed refresh token store.

    Layout (both keys expire with the token):

    - ``rt:user:{user_id}`` hash ``{token, expires_at}``: the single live record.
    - ``rt:tok:{sha256(token)}`` string ``user_id``: reverse index for lookups.

    Writes that depend on the current record (``upsert``, ``rotate``,
    ``delete_by_token``) use WATCH/MULTI/EXEC on the user key and retry on
    :class:`redis.WatchError`.

    :param r: A Redis client (already connected).
    """

    r: redis.Redis
    prefix: str = "rt"

    # -------------------- helpers --------------------

    def _ku(self, user_id: str) -> str:
        return f"{self.prefix}:user:{user_id}"

    def _kt(self, token: str) -> str:
        digest = hashlib.sha256(token.encode("utf-8")).hexdigest()
        return f"{self.prefix}:tok:{digest}"

    @staticmethod
    def _ttl(expires_at: datetime) -> int:
        remaining = (as_utc(expires_at) - datetime.now(UTC)).total_seconds()
        return max(1, math.ceil(remaining))

    def _stage_record(self, p, user_id: str, token: str, expires_at: datetime) -> None:
        expires_at = as_utc(expires_at)
        ttl = self._ttl(expires_at)
        k_user = self._ku(user_id)
        p.hset(k_user, mapping={"token": token, "expires_at": expires_at.isoformat()})
        p.expire(k_user, ttl)
        p.set(self._kt(token), user_id, ex=ttl)

    def _read_user(self, p, user_id: str) -> tuple[str | None, str | None]:
        token, expires_at = p.hmget(self._ku(user_id), "token", "expires_at")
        return _s(token), _s(expires_at)

    # -------------------- API ------------------------

    def upsert(self, user_id: str, token: str, expires_at: datetime) -> None:
        k_user = self._ku(user_id)
        while True:
            try:
                with self.r.pipeline() as p:
                    p.watch(k_user)
                    previous, _ = self._read_user(p, user_id)
                    p.multi()
                    if previous and previous != token:
                        p.delete(self._kt(previous))
                    self._stage_record(p, user_id, token, expires_at)
                    p.execute()
                return
            except redis.WatchError:
                continue

    def find_by_token(self, token: str) -> RefreshRecord | None:
        user_id = _s(self.r.get(self._kt(token)))
        if not user_id:
            return None
        current, expires_at = self._read_user(self.r, user_id)
        # Stale reverse index entry: the user has moved on to another token.
        if current != token or not expires_at:
            return None
        return RefreshRecord(user_id, token, as_utc(datetime.fromisoformat(expires_at)))

    def delete_by_token(self, token: str) -> int:
        k_tok = self._kt(token)
        user_id = _s(self.r.get(k_tok))
        if not user_id:
            return 0
        k_user = self._ku(user_id)
        while True:
            try:
                with self.r.pipeline() as p:
                    p.watch(k_user, k_tok)
                    current, _ = self._read_user(p, user_id)
                    p.multi()
                    p.delete(k_tok)
                    if current == token:
                        p.delete(k_user)
                    p.execute()
                return 1 if current == token else 0
            except redis.WatchError:
                continue

    def delete_for_user(self, user_id: str) -> int:
        k_user = self._ku(user_id)
        while True:
            try:
                with self.r.pipeline() as p:
                    p.watch(k_user)
                    current, _ = self._read_user(p, user_id)
                    if current is None:
                        p.unwatch()
                        return 0
                    p.multi()
                    p.delete(k_user, self._kt(current))
                    p.execute()
                return 1
            except redis.WatchError:
                continue

    def rotate(self, user_id: str, old_token: str, new_token: str, expires_at: datetime) -> bool:
        """
        Atomically replace ``old_token`` with ``new_token`` for ``user_id``.

        Optimistic locking: if another writer touches the user key between the
        read and EXEC, the transaction aborts and the check runs again against
        the new state, where ``old_token`` no longer matches.
        """
        k_user = self._ku(user_id)
        while True:
            try:
                with self.r.pipeline() as p:
                    p.watch(k_user)
                    current, _ = self._read_user(p, user_id)
                    if current != old_token:
                        p.unwatch()
                        return False
                    p.multi()
                    p.delete(self._kt(old_token))
                    self._stage_record(p, user_id, new_token, expires_at)
                    p.execute()
                return True
            except redis.WatchError:
                continue

    def purge_expired(self, now: datetime) -> int:
        """Drop records whose ``expires_at`` passed but whose TTL has not fired yet."""
        now = as_utc(now)
        removed = 0
        for key in self.r.scan_iter(match=self._ku("*")):
            token, expires_at = (_s(v) for v in self.r.hmget(key, "token", "expires_at"))
            if not expires_at or as_utc(datetime.fromisoformat(expires_at)) >= now:
                continue
            keys = [key] + ([self._kt(token)] if token else [])
            removed += 1 if self.r.delete(*keys) else 0
        return removed
