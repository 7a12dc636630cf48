"""Unit tests for UserService registration and listing."""

from __future__ import annotations

import pytest
from backoffice.services._shared.base import ServiceContext
from backoffice.services._shared.errors import ConflictError, PermissionDeniedError, ServiceError
from backoffice.services.users import UserListIn, UserRegisterIn, UserService

from tests.factories.tenant import TenantFactory
from tests.factories.user import AdminFactory, UserFactory


def _ctx(user) -> ServiceContext:
    return ServiceContext(actor_id=user.id, tenant_id=user.tenant_id, role=user.role)


def test_admin_registers_user_in_own_tenant():
    admin = AdminFactory()
    summary = UserService(ctx=_ctx(admin)).register(
        UserRegisterIn(email="New@Example.com", password="secret1", name="New")
    )
    assert summary.email == "new@example.com"
    assert summary.tenant_id == admin.tenant_id
    assert summary.role == "user"


def test_registered_user_can_log_in_with_password(session):
    from backoffice.models import User

    admin = AdminFactory()
    UserService(ctx=_ctx(admin)).register(UserRegisterIn(email="n@example.com", password="secret1", name="N"))
    user = session.query(User).filter_by(email="n@example.com").one()
    assert user.verify_password("secret1") is True
    assert user.password_hash != "secret1"


def test_non_admin_cannot_register():
    member = UserFactory(role="user")
    with pytest.raises(PermissionDeniedError):
        UserService(ctx=_ctx(member)).register(
            UserRegisterIn(email="x@example.com", password="secret1", name="X")
        )


def test_duplicate_email_conflicts_across_tenants():
    UserFactory(email="taken@example.com")
    admin = AdminFactory()
    with pytest.raises(ConflictError):
        UserService(ctx=_ctx(admin)).register(
            UserRegisterIn(email="TAKEN@example.com", password="secret1", name="Dup")
        )


def test_register_rejects_password_bcrypt_cannot_hash(session):
    from backoffice.models import User

    admin = AdminFactory()
    with pytest.raises(ServiceError, match="72 bytes"):
        UserService(ctx=_ctx(admin)).register(
            UserRegisterIn(email="long@example.com", password="\u00e9" * 40, name="Long")
        )
    assert session.query(User).filter_by(email="long@example.com").count() == 0


def test_list_users_is_tenant_scoped():
    tenant = TenantFactory()
    admin = AdminFactory(tenant=tenant)
    UserFactory(tenant=tenant)
    UserFactory()  # other tenant

    result = UserService(ctx=_ctx(admin)).list_users(UserListIn(sort=["email"]))

    assert result.total == 2
    assert {u.tenant_id for u in result.items} == {tenant.id}
