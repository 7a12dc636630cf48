"""Unit tests for tenant-aware repository behavior."""

from __future__ import annotations

import pytest
from backoffice.models import Category
from backoffice.repositories import CategoryRepository, TenantRepository, UserRepository
from backoffice.repositories.base import Pagination, parse_sort_tokens

from tests.factories.category import CategoryFactory
from tests.factories.tenant import TenantFactory
from tests.factories.user import UserFactory


def test_parse_sort_tokens():
    assert parse_sort_tokens(["-created_at", "name", " ", "-"]) == [
        ("created_at", True),
        ("name", False),
    ]


def test_get_active_by_email_requires_active_user_and_tenant(session):
    repo = UserRepository(session)
    active = UserFactory(email="on@example.com")
    UserFactory(email="off@example.com", is_active=False)
    UserFactory(email="closed@example.com", tenant=TenantFactory(is_active=False))

    assert repo.get_active_by_email("ON@example.com").id == active.id
    assert repo.get_active_by_email("off@example.com") is None
    assert repo.get_active_by_email("closed@example.com") is None
    assert repo.get_by_email("off@example.com") is not None


def test_get_in_tenant(session):
    repo = UserRepository(session)
    user = UserFactory()
    other = TenantFactory()
    assert repo.get_in_tenant(user.id, user.tenant_id).id == user.id
    assert repo.get_in_tenant(user.id, other.id) is None


def test_unknown_filters_are_ignored(session):
    repo = UserRepository(session)
    UserFactory()
    assert len(repo.list(filters={"password_hash": "x"})) == 1


def test_tenant_repository_subdomain_lookup(session):
    repo = TenantRepository(session)
    TenantFactory(subdomain="acme")
    TenantFactory(subdomain="dormant", is_active=False)
    assert repo.get_by_subdomain(" Acme ").subdomain == "acme"
    assert repo.get_by_subdomain("dormant") is None
    assert repo.get_by_subdomain("dormant", active_only=False) is not None


def test_scoped_repository_requires_tenant(session):
    with pytest.raises(RuntimeError):
        CategoryRepository(session).list()


def test_scoped_repository_filters_and_stamps(session):
    acme, globex = TenantFactory(), TenantFactory()
    mine = CategoryFactory(tenant=acme)
    theirs = CategoryFactory(tenant=globex)
    repo = CategoryRepository(session).for_tenant(acme.id)

    assert repo.get(mine.id) is not None
    assert repo.get(theirs.id) is None

    added = repo.add(Category(name="Stamped", tenant_id=globex.id))
    assert added.tenant_id == acme.id


def test_scoped_pagination(session):
    tenant = TenantFactory()
    for i in range(5):
        CategoryFactory(tenant=tenant, name=f"c{i}")
    CategoryFactory()  # other tenant

    page = CategoryRepository(session, tenant_id=tenant.id).paginate(
        Pagination(page=2, limit=2, sort=["-name"])
    )
    assert [c.name for c in page.items] == ["c2", "c1"]
    assert page.total == 5
    assert page.total_pages == 3


def test_update_rejects_non_whitelisted_fields(session):
    category = CategoryFactory()
    repo = CategoryRepository(session, tenant_id=category.tenant_id)
    with pytest.raises(ValueError):
        repo.update(category, tenant_id="elsewhere")
