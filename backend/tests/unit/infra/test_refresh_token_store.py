"""
Contract tests shared by every refresh token store.

Each test runs against the in-memory store, the SQLAlchemy store on the test
database and the Redis store on fakeredis:

- upsert keeps a single record per user
- lookups by exact token value
- delete by token / by user
- rotate is a compare-and-swap
- purge_expired removes only past records
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from backoffice.infra.redis import RedisRefreshTokenStore
from backoffice.infra.sqlalchemy import SQLAlchemyRefreshTokenStore
from backoffice.models import RefreshToken
from backoffice.services._shared.ports import InMemoryRefreshTokenStore
from sqlalchemy import func, select

from tests.factories.user import UserFactory


def _now() -> datetime:
    """Return a timezone-aware UTC "now" without microseconds."""
    return datetime.now(UTC).replace(microsecond=0)


@pytest.fixture(params=["memory", "sqlalchemy", "redis"])
def store(request, session, fake_redis):
    if request.param == "memory":
        return InMemoryRefreshTokenStore()
    if request.param == "sqlalchemy":
        return SQLAlchemyRefreshTokenStore(lambda: session)
    return RedisRefreshTokenStore(r=fake_redis)


@pytest.fixture()
def user_ids():
    """Two persisted users (the SQL store has a foreign key to ``users``)."""
    return [UserFactory().id, UserFactory().id]


def test_upsert_then_find(store, user_ids):
    uid = user_ids[0]
    expires = _now() + timedelta(days=7)
    store.upsert(uid, "tok-1", expires)

    record = store.find_by_token("tok-1")
    assert record is not None
    assert record.user_id == uid
    assert record.token == "tok-1"
    assert record.expires_at == expires
    assert record.expires_at.tzinfo is not None


def test_find_unknown_token(store):
    assert store.find_by_token("never-issued") is None


def test_upsert_overwrites_previous_token(store, user_ids):
    uid = user_ids[0]
    store.upsert(uid, "tok-1", _now() + timedelta(days=7))
    store.upsert(uid, "tok-2", _now() + timedelta(days=7))

    assert store.find_by_token("tok-1") is None
    assert store.find_by_token("tok-2").user_id == uid


def test_users_are_independent(store, user_ids):
    a, b = user_ids
    store.upsert(a, "tok-a", _now() + timedelta(days=7))
    store.upsert(b, "tok-b", _now() + timedelta(days=7))

    assert store.delete_for_user(a) == 1
    assert store.find_by_token("tok-a") is None
    assert store.find_by_token("tok-b").user_id == b


def test_delete_by_token(store, user_ids):
    uid = user_ids[0]
    store.upsert(uid, "tok-1", _now() + timedelta(days=7))

    assert store.delete_by_token("tok-1") == 1
    assert store.find_by_token("tok-1") is None
    assert store.delete_by_token("tok-1") == 0


def test_delete_for_unknown_user(store):
    assert store.delete_for_user("nobody") == 0


def test_rotate_swaps_when_token_matches(store, user_ids):
    uid = user_ids[0]
    store.upsert(uid, "old", _now() + timedelta(days=1))
    new_expiry = _now() + timedelta(days=7)

    assert store.rotate(uid, "old", "new", new_expiry) is True
    assert store.find_by_token("old") is None
    record = store.find_by_token("new")
    assert record.user_id == uid
    assert record.expires_at == new_expiry


def test_rotate_is_compare_and_swap(store, user_ids):
    """Only the first of two refreshes presenting the same token wins."""
    uid = user_ids[0]
    store.upsert(uid, "old", _now() + timedelta(days=7))

    assert store.rotate(uid, "old", "winner", _now() + timedelta(days=7)) is True
    assert store.rotate(uid, "old", "loser", _now() + timedelta(days=7)) is False
    assert store.find_by_token("winner") is not None
    assert store.find_by_token("loser") is None


def test_rotate_without_record(store, user_ids):
    assert store.rotate(user_ids[0], "old", "new", _now() + timedelta(days=7)) is False
    assert store.find_by_token("new") is None


def test_rotate_after_new_login_fails(store, user_ids):
    uid = user_ids[0]
    store.upsert(uid, "first-login", _now() + timedelta(days=7))
    store.upsert(uid, "second-login", _now() + timedelta(days=7))

    assert store.rotate(uid, "first-login", "new", _now() + timedelta(days=7)) is False
    assert store.find_by_token("second-login") is not None


def test_purge_expired(store, user_ids):
    dead, alive = user_ids
    store.upsert(dead, "dead", _now() - timedelta(hours=1))
    store.upsert(alive, "alive", _now() + timedelta(hours=1))

    assert store.purge_expired(_now()) == 1
    assert store.find_by_token("dead") is None
    assert store.find_by_token("alive") is not None


def test_expired_records_are_still_returned(store, user_ids):
    """Expiry is judged by the caller; the store only reports ``expires_at``."""
    uid = user_ids[0]
    store.upsert(uid, "tok", _now() - timedelta(seconds=1))
    record = store.find_by_token("tok")
    assert record is not None
    assert record.is_expired(_now()) is True


# ---------------------------------------------------------------------------
# Backend specifics
# ---------------------------------------------------------------------------


def test_sql_store_keeps_one_row_per_user(session, user_ids):
    store = SQLAlchemyRefreshTokenStore(lambda: session)
    uid = user_ids[0]
    for i in range(3):
        store.upsert(uid, f"tok-{i}", _now() + timedelta(days=7))

    count = session.execute(
        select(func.count()).select_from(RefreshToken).where(RefreshToken.user_id == uid)
    ).scalar_one()
    assert count == 1


def test_redis_store_sets_ttl(fake_redis):
    store = RedisRefreshTokenStore(r=fake_redis)
    store.upsert("u-1", "tok", _now() + timedelta(minutes=10))

    ttl = fake_redis.ttl("rt:user:u-1")
    assert 0 < ttl <= 600
    assert fake_redis.get(store._kt("tok")) == b"u-1"


def test_redis_store_drops_reverse_index_of_replaced_token(fake_redis):
    store = RedisRefreshTokenStore(r=fake_redis)
    store.upsert("u-1", "tok-1", _now() + timedelta(minutes=10))
    store.upsert("u-1", "tok-2", _now() + timedelta(minutes=10))

    assert fake_redis.get(store._kt("tok-1")) is None
    assert fake_redis.get(store._kt("tok-2")) == b"u-1"


def test_in_memory_store_len():
    store = InMemoryRefreshTokenStore()
    store.upsert("u-1", "a", _now())
    store.upsert("u-1", "b", _now())
    store.upsert("u-2", "c", _now())
    assert len(store) == 2
