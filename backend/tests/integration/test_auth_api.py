"""HTTP tests for the auth endpoints: login, refresh, signout, me, register, users."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from backoffice.core.auth import get_refresh_store, get_token_provider
from backoffice.models import RefreshToken
from backoffice.services._shared.ports import Identity, as_utc

from tests.factories.tenant import TenantFactory
from tests.factories.user import AdminFactory, UserFactory
from tests.helpers.auth import (
    API,
    bearer,
    cookie_attributes,
    cookie_value,
    cookies,
    login,
    set_cookie,
)


def _identity(user) -> Identity:
    return Identity(id=user.id, email=user.email, role=user.role, tenant_id=user.tenant_id)


# ------------------------------- Login ------------------------------------ #
def test_login_returns_tokens_and_persists_refresh(client, session):
    user = UserFactory(email="a@x.com", raw_password="secret")

    resp = login(client, "a@x.com", "secret")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["user"] == {
        "email": "a@x.com",
        "name": user.name,
        "role": "user",
        "tenantId": user.tenant_id,
    }
    assert body["accessToken"] and body["refreshToken"]
    assert cookie_value(resp, "accessToken") == body["accessToken"]
    assert cookie_value(resp, "refreshToken") == body["refreshToken"]

    row = session.query(RefreshToken).filter_by(user_id=user.id).one()
    assert row.token == body["refreshToken"]
    expected = datetime.now(UTC) + timedelta(days=7)
    assert abs((as_utc(row.expires_at) - expected).total_seconds()) < 5


def test_login_cookie_attributes(client):
    UserFactory(email="a@x.com")
    resp = login(client, "a@x.com")

    access = cookie_attributes(set_cookie(resp, "accessToken"))
    refresh = cookie_attributes(set_cookie(resp, "refreshToken"))
    for attrs in (access, refresh):
        assert attrs["httponly"] is True
        assert attrs["secure"] is True
        assert attrs["samesite"] == "Strict"
        assert attrs["path"] == "/"
    assert access["max-age"] == str(24 * 3600)
    assert refresh["max-age"] == str(7 * 24 * 3600)


def test_login_failures_share_shape(client):
    UserFactory(email="a@x.com")

    unknown = login(client, "nobody@x.com", "secret")
    wrong = login(client, "a@x.com", "wrong")

    assert unknown.status_code == wrong.status_code == 400
    a, b = unknown.get_json(), wrong.get_json()
    assert a["code"] == b["code"] == "invalid_credentials"
    assert a["detail"] == b["detail"] == "Invalid email or password"
    assert set_cookie(unknown, "accessToken") is None


def test_login_missing_fields(client):
    resp = client.post(f"{API}/auth/login", json={"email": "a@x.com"})
    assert resp.status_code == 400
    assert resp.get_json()["code"] == "missing_credentials"

    resp = client.post(f"{API}/auth/login", data="not json", content_type="text/plain")
    assert resp.status_code == 400
    assert resp.mimetype == "application/problem+json"


# ------------------------------ Refresh ----------------------------------- #
def test_refresh_via_cookie_rotates(client):
    UserFactory(email="a@x.com")
    old = login(client, "a@x.com").get_json()["refreshToken"]

    resp = client.post(f"{API}/auth/refresh", headers=cookies(refreshToken=old))

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["refreshToken"] != old
    assert cookie_value(resp, "refreshToken") == body["refreshToken"]
    assert cookie_value(resp, "accessToken") == body["accessToken"]

    replay = client.post(f"{API}/auth/refresh", headers=cookies(refreshToken=old))
    assert replay.status_code == 403
    assert replay.get_json()["code"] == "session_expired"


def test_refresh_via_body(client):
    UserFactory(email="a@x.com")
    old = login(client, "a@x.com").get_json()["refreshToken"]

    resp = client.post(f"{API}/auth/refresh", json={"refreshToken": old})
    assert resp.status_code == 200


def test_refresh_cookie_wins_over_body(client):
    UserFactory(email="a@x.com")
    live = login(client, "a@x.com").get_json()["refreshToken"]

    resp = client.post(
        f"{API}/auth/refresh",
        headers=cookies(refreshToken=live),
        json={"refreshToken": "garbage"},
    )
    assert resp.status_code == 200


def test_refresh_without_token(client):
    resp = client.post(f"{API}/auth/refresh")
    assert resp.status_code == 403
    assert resp.get_json()["code"] == "missing_refresh_token"


def test_refresh_with_never_issued_token(client, app):
    user = UserFactory()
    never_issued = get_token_provider().sign_refresh(_identity(user)).value

    resp = client.post(f"{API}/auth/refresh", json={"refreshToken": never_issued})

    assert resp.status_code == 403
    assert resp.get_json()["code"] == "session_expired"
    assert get_refresh_store().find_by_token(never_issued) is None


def test_refresh_after_second_login_rejects_first(client):
    UserFactory(email="a@x.com")
    first = login(client, "a@x.com").get_json()["refreshToken"]
    second = login(client, "a@x.com").get_json()["refreshToken"]

    assert client.post(f"{API}/auth/refresh", json={"refreshToken": first}).status_code == 403
    assert client.post(f"{API}/auth/refresh", json={"refreshToken": second}).status_code == 200


def test_refresh_past_expiry_removes_record(client):
    user = UserFactory(email="a@x.com")
    token = login(client, "a@x.com").get_json()["refreshToken"]
    store = get_refresh_store()
    store.upsert(user.id, token, datetime.now(UTC) - timedelta(seconds=1))

    resp = client.post(f"{API}/auth/refresh", json={"refreshToken": token})

    assert resp.status_code == 403
    assert resp.get_json()["code"] == "session_expired"
    assert store.find_by_token(token) is None


# ------------------------------- Signout ---------------------------------- #
def test_signout_clears_cookies_and_revokes(client):
    UserFactory(email="a@x.com")
    token = login(client, "a@x.com").get_json()["refreshToken"]

    resp = client.post(f"{API}/auth/signout", headers=cookies(refreshToken=token))

    assert resp.status_code == 200
    assert resp.get_json() == {"message": "Signed out successfully"}
    for name in ("accessToken", "refreshToken"):
        attrs = cookie_attributes(set_cookie(resp, name))
        assert cookie_value(resp, name) == ""
        assert attrs["max-age"] == "0"
        assert attrs["path"] == "/"
        assert attrs["httponly"] is True
        assert attrs["samesite"] == "Strict"
    assert get_refresh_store().find_by_token(token) is None


def test_signout_without_session_is_ok(client):
    resp = client.post(f"{API}/auth/signout")
    assert resp.status_code == 200


def test_signout_can_keep_refresh_record(client, app):
    UserFactory(email="a@x.com")
    token = login(client, "a@x.com").get_json()["refreshToken"]
    app.config["AUTH_LOGOUT_REVOKES_REFRESH"] = False
    try:
        client.post(f"{API}/auth/signout", headers=cookies(refreshToken=token))
    finally:
        app.config["AUTH_LOGOUT_REVOKES_REFRESH"] = True
    assert get_refresh_store().find_by_token(token) is not None


# ------------------------------ Protected --------------------------------- #
def test_me_requires_token(client):
    resp = client.get(f"{API}/auth/me")
    assert resp.status_code == 401
    assert resp.get_json()["code"] == "unauthenticated"


def test_me_rejects_bad_token(client):
    resp = client.get(f"{API}/auth/me", headers=bearer("not-a-jwt"))
    assert resp.status_code == 403
    assert resp.get_json()["code"] == "invalid_token"


def test_me_rejects_refresh_token_as_access(client):
    UserFactory(email="a@x.com")
    refresh = login(client, "a@x.com").get_json()["refreshToken"]
    assert client.get(f"{API}/auth/me", headers=bearer(refresh)).status_code == 403


def test_me_with_cookie_or_bearer(client):
    user = UserFactory(email="a@x.com")
    access = login(client, "a@x.com").get_json()["accessToken"]

    via_cookie = client.get(f"{API}/auth/me", headers=cookies(accessToken=access))
    via_header = client.get(f"{API}/auth/me", headers=bearer(access))

    for resp in (via_cookie, via_header):
        assert resp.status_code == 200
        data = resp.get_json()["user"]
        assert data["id"] == user.id
        assert data["tenantId"] == user.tenant_id
        assert data["tenant"] == {"name": user.tenant.name}


def test_access_token_is_not_checked_against_store(client):
    """Access tokens stay valid until expiry even after signout."""
    UserFactory(email="a@x.com")
    body = login(client, "a@x.com").get_json()
    client.post(f"{API}/auth/signout", headers=cookies(refreshToken=body["refreshToken"]))

    assert client.get(f"{API}/auth/me", headers=bearer(body["accessToken"])).status_code == 200


# ------------------------------ Register ---------------------------------- #
def test_register_by_admin_uses_token_tenant(client):
    admin = AdminFactory(email="boss@x.com")
    other = TenantFactory()
    access = login(client, "boss@x.com").get_json()["accessToken"]

    resp = client.post(
        f"{API}/auth/register",
        headers=bearer(access),
        json={
            "email": "new@x.com",
            "password": "secret1",
            "name": "New",
            "tenantId": other.id,
        },
    )

    assert resp.status_code == 201
    user = resp.get_json()["user"]
    assert user["tenantId"] == admin.tenant_id
    assert user["role"] == "user"
    assert login(client, "new@x.com", "secret1").status_code == 200


def test_register_requires_admin(client):
    UserFactory(email="member@x.com")
    access = login(client, "member@x.com").get_json()["accessToken"]

    resp = client.post(
        f"{API}/auth/register",
        headers=bearer(access),
        json={"email": "new@x.com", "password": "secret1", "name": "New"},
    )
    assert resp.status_code == 403


def test_register_duplicate_email(client):
    AdminFactory(email="boss@x.com")
    UserFactory(email="taken@x.com")
    access = login(client, "boss@x.com").get_json()["accessToken"]

    resp = client.post(
        f"{API}/auth/register",
        headers=bearer(access),
        json={"email": "taken@x.com", "password": "secret1", "name": "Dup"},
    )
    assert resp.status_code == 409


def test_register_validates_payload(client):
    AdminFactory(email="boss@x.com")
    access = login(client, "boss@x.com").get_json()["accessToken"]

    resp = client.post(
        f"{API}/auth/register",
        headers=bearer(access),
        json={"email": "bad", "password": "123", "name": ""},
    )
    assert resp.status_code == 422
    errors = resp.get_json()["details"]["errors"]
    assert {"email", "password", "name"} <= errors.keys()


def test_register_rejects_password_over_72_utf8_bytes(client):
    AdminFactory(email="boss@x.com")
    access = login(client, "boss@x.com").get_json()["accessToken"]

    resp = client.post(
        f"{API}/auth/register",
        headers=bearer(access),
        json={"email": "new@x.com", "password": "\u00e9" * 40, "name": "New"},
    )

    assert resp.status_code == 422
    assert resp.get_json()["code"] == "validation_error"
    assert "password" in resp.get_json()["details"]["errors"]


def test_register_accepts_multibyte_password_within_limit(client):
    AdminFactory(email="boss@x.com")
    access = login(client, "boss@x.com").get_json()["accessToken"]
    password = "\u00e9" * 36  # 72 bytes

    resp = client.post(
        f"{API}/auth/register",
        headers=bearer(access),
        json={"email": "new@x.com", "password": password, "name": "New"},
    )

    assert resp.status_code == 201
    assert login(client, "new@x.com", password).status_code == 200


# -------------------------------- Users ----------------------------------- #
def test_users_list_is_tenant_scoped(client):
    tenant = TenantFactory()
    AdminFactory(email="boss@x.com", tenant=tenant)
    UserFactory(tenant=tenant)
    UserFactory()
    access = login(client, "boss@x.com").get_json()["accessToken"]

    resp = client.get(f"{API}/auth/users?limit=1&sort=email", headers=bearer(access))

    assert resp.status_code == 200
    body = resp.get_json()
    assert len(body["data"]) == 1
    assert body["meta"] == {"total": 2, "page": 1, "limit": 1, "totalPages": 2}
    assert body["data"][0]["tenantId"] == tenant.id
