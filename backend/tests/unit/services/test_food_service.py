"""Unit tests for FoodService tenant isolation, category ownership and the public menu."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from backoffice.services._shared.base import ServiceContext
from backoffice.services._shared.errors import ConflictError, NotFoundError, UnauthenticatedError
from backoffice.services.foods import FoodCreateIn, FoodListIn, FoodService, FoodUpdateIn

from tests.factories.category import CategoryFactory
from tests.factories.food import FoodFactory
from tests.factories.tenant import TenantFactory


@pytest.fixture()
def tenants():
    return TenantFactory(subdomain="acme", name="Acme Diner"), TenantFactory(subdomain="globex")


@pytest.fixture()
def mains(tenants):
    return CategoryFactory(tenant=tenants[0], name="Mains")


def _service(tenant) -> FoodService:
    return FoodService(ctx=ServiceContext(actor_id="u-1", tenant_id=tenant.id, role="admin"))


# --------------------------------- Create --------------------------------- #
def test_create_stamps_caller_tenant_and_category(tenants, mains):
    acme, _ = tenants
    out = _service(acme).create(FoodCreateIn(name="Burger", price=12.5, category_id=mains.id))

    assert out.id is not None
    assert out.tenant_id == acme.id
    assert out.price == 12.5
    assert out.category.id == mains.id
    assert out.category.name == "Mains"
    assert out.created_at is not None


def test_create_with_foreign_category_is_not_found(tenants):
    acme, globex = tenants
    foreign = CategoryFactory(tenant=globex, name="Theirs")

    with pytest.raises(NotFoundError):
        _service(acme).create(FoodCreateIn(name="Burger", price=1, category_id=foreign.id))
    assert _service(globex).list_all() == []


def test_create_with_unknown_category_is_not_found(tenants):
    with pytest.raises(NotFoundError):
        _service(tenants[0]).create(FoodCreateIn(name="Burger", price=1, category_id=999_999))


def test_duplicate_name_conflicts_within_tenant_only(tenants, mains):
    acme, globex = tenants
    FoodFactory(tenant=acme, category=mains, name="Burger")

    with pytest.raises(ConflictError):
        _service(acme).create(FoodCreateIn(name="Burger", price=1, category_id=mains.id))

    other = CategoryFactory(tenant=globex)
    assert _service(globex).create(FoodCreateIn(name="Burger", price=1, category_id=other.id)).id


# --------------------------------- Queries -------------------------------- #
def test_list_is_scoped_sorted_and_searchable(tenants, mains):
    acme, globex = tenants
    FoodFactory(tenant=acme, category=mains, name="Burger", price=12, description="Beef")
    FoodFactory(tenant=acme, category=mains, name="Salad", price=8, description="Green")
    FoodFactory(tenant=acme, category=mains, name="Steak", price=25, description="Aged beef")
    FoodFactory(tenant=globex, name="Beef Ramen", price=14)

    by_price = _service(acme).list_foods(FoodListIn(sort=["-price"], limit=2))
    assert [f.name for f in by_price.items] == ["Steak", "Burger"]
    assert (by_price.total, by_price.total_pages) == (3, 2)

    beef = _service(acme).list_foods(FoodListIn(search="BEEF", sort=["name"]))
    assert [f.name for f in beef.items] == ["Burger", "Steak"]


def test_list_all_orders_by_name(tenants, mains):
    acme, _ = tenants
    FoodFactory(tenant=acme, category=mains, name="Zucchini")
    FoodFactory(tenant=acme, category=mains, name="Apple Pie")

    assert [f.name for f in _service(acme).list_all()] == ["Apple Pie", "Zucchini"]


def test_public_menu_lists_newest_first_with_tenant(tenants, mains):
    acme, globex = tenants
    FoodFactory(tenant=acme, category=mains, name="Old", created_at=datetime(2024, 1, 1, tzinfo=UTC))
    FoodFactory(tenant=acme, category=mains, name="New", created_at=datetime(2025, 1, 1, tzinfo=UTC))
    FoodFactory(tenant=globex, name="Elsewhere")

    menu = FoodService().public_menu("ACME")

    assert (menu.tenant_id, menu.tenant_name) == (acme.id, "Acme Diner")
    assert [f.name for f in menu.items] == ["New", "Old"]
    assert menu.items[0].category.name == "Mains"


def test_public_menu_of_unknown_or_inactive_tenant_is_not_found():
    TenantFactory(subdomain="closed", is_active=False)
    with pytest.raises(NotFoundError):
        FoodService().public_menu("closed")
    with pytest.raises(NotFoundError):
        FoodService().public_menu("nowhere")


# --------------------------------- Update --------------------------------- #
def test_update_applies_sent_fields_and_moves_category(tenants, mains):
    acme, _ = tenants
    drinks = CategoryFactory(tenant=acme, name="Drinks")
    food = FoodFactory(tenant=acme, category=mains, name="Lemonade", price=3, description="Keep")

    out = _service(acme).update(
        FoodUpdateIn(food_id=food.id, changes={"price": 3.5, "category_id": drinks.id})
    )

    assert out.price == 3.5
    assert out.description == "Keep"
    assert out.category_id == drinks.id
    assert out.category.name == "Drinks"


def test_update_cannot_move_item_to_foreign_category(tenants, mains):
    acme, globex = tenants
    food = FoodFactory(tenant=acme, category=mains)
    foreign = CategoryFactory(tenant=globex)

    with pytest.raises(NotFoundError):
        _service(acme).update(FoodUpdateIn(food_id=food.id, changes={"category_id": foreign.id}))


def test_update_rename_onto_existing_conflicts(tenants, mains):
    acme, _ = tenants
    FoodFactory(tenant=acme, category=mains, name="Burger")
    food = FoodFactory(tenant=acme, category=mains, name="Fries")

    with pytest.raises(ConflictError):
        _service(acme).update(FoodUpdateIn(food_id=food.id, changes={"name": "Burger"}))


def test_foreign_item_is_not_found(tenants):
    acme, globex = tenants
    foreign = FoodFactory(tenant=globex)

    with pytest.raises(NotFoundError):
        _service(acme).update(FoodUpdateIn(food_id=foreign.id, changes={"name": "Mine"}))
    with pytest.raises(NotFoundError):
        _service(acme).delete(foreign.id)


# --------------------------------- Delete --------------------------------- #
def test_delete(tenants, mains):
    acme, _ = tenants
    food = FoodFactory(tenant=acme, category=mains)
    _service(acme).delete(food.id)
    assert _service(acme).list_all() == []


def test_scoped_operations_require_tenant():
    with pytest.raises(UnauthenticatedError):
        FoodService().list_all()
