"""
FoodService
===========

Tenant-scoped CRUD for food items and the public menu of a tenant.

- Items and the category they reference must belong to ``ctx.tenant_id``;
  a category of another tenant behaves as missing.
- Names are unique per tenant.
"""

from __future__ import annotations

import logging

from backoffice.models.food import Food
from backoffice.repositories.category import CategoryRepository
from backoffice.repositories.food import FoodRepository
from backoffice.services._shared.base import BaseService
from backoffice.services._shared.errors import ConflictError, NotFoundError
from backoffice.services.foods.dto import (
    FoodCategoryOut,
    FoodCreateIn,
    FoodListIn,
    FoodListOut,
    FoodOut,
    FoodUpdateIn,
    PublicMenuOut,
)

logger = logging.getLogger(__name__)


def _to_out(food: Food) -> FoodOut:
    category = food.category
    return FoodOut(
        id=food.id,
        name=food.name,
        price=food.price,
        description=food.description,
        image_url=food.image_url,
        category_id=food.category_id,
        category=FoodCategoryOut(id=category.id, name=category.name) if category else None,
        tenant_id=food.tenant_id,
        created_at=food.created_at,
        updated_at=food.updated_at,
    )


class FoodService(BaseService):
    """Application service for the ``Food`` aggregate."""

    def _foods(self, repo: FoodRepository) -> FoodRepository:
        return repo.for_tenant(self.ctx.require_tenant())  # type: ignore[return-value]

    def _require_category(self, repo: CategoryRepository, category_id: int) -> None:
        scoped = repo.for_tenant(self.ctx.require_tenant())
        if scoped.get(category_id) is None:
            raise NotFoundError("Category", category_id)

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def list_foods(self, dto: FoodListIn) -> FoodListOut:
        pagination = self.ensure_pagination(
            page=dto.page, limit=dto.limit, sort=dto.sort or ["created_at"], search=dto.search
        )
        with self.ro_uow() as uow:
            page = self._foods(uow.foods).paginate(pagination)
            items = [_to_out(f) for f in page.items]
        return FoodListOut(
            items=items,
            total=page.total,
            page=page.page,
            limit=page.limit,
            total_pages=page.total_pages,
        )

    def list_all(self) -> list[FoodOut]:
        with self.ro_uow() as uow:
            return [_to_out(f) for f in self._foods(uow.foods).list(sort=["name"])]

    def public_menu(self, subdomain: str) -> PublicMenuOut:
        """
        Items of the active tenant published under ``subdomain``, newest first.

        :raises NotFoundError: For unknown or inactive tenants.
        """
        with self.ro_uow() as uow:
            tenant = uow.tenants.get_by_subdomain(subdomain)
            if tenant is None:
                raise NotFoundError("Tenant", subdomain)
            foods = uow.foods.for_tenant(tenant.id).list(sort=["-created_at"])
            return PublicMenuOut(
                tenant_id=tenant.id,
                tenant_name=tenant.name,
                items=[_to_out(f) for f in foods],
            )

    # ------------------------------------------------------------------ #
    # Commands
    # ------------------------------------------------------------------ #

    def create(self, dto: FoodCreateIn) -> FoodOut:
        """
        :raises NotFoundError: If ``category_id`` is not a category of the tenant.
        :raises ConflictError: If the tenant already has an item with that name.
        """
        with self.rw_uow() as uow:
            self._require_category(uow.categories, dto.category_id)
            repo = self._foods(uow.foods)
            if repo.name_taken(dto.name):
                raise ConflictError("Food", "name already exists")
            food = repo.add(
                Food(
                    name=dto.name,
                    price=dto.price,
                    description=dto.description,
                    image_url=dto.image_url,
                    category_id=dto.category_id,
                )
            )
            out = _to_out(repo.refresh(food))
        logger.info(
            "food.created",
            extra={"event": "food.created", "tenant_id": out.tenant_id, "user_id": self.ctx.actor_id},
        )
        return out

    def update(self, dto: FoodUpdateIn) -> FoodOut:
        """
        :raises NotFoundError: If the item, or a new ``category_id``, is not in the tenant.
        :raises ConflictError: If renaming onto an existing name.
        """
        with self.rw_uow() as uow:
            repo = self._foods(uow.foods)
            food = repo.get(dto.food_id)
            if food is None:
                raise NotFoundError("Food", dto.food_id)
            if "category_id" in dto.changes:
                self._require_category(uow.categories, dto.changes["category_id"])
            new_name = dto.changes.get("name")
            if new_name and repo.name_taken(new_name, exclude_id=food.id):
                raise ConflictError("Food", "name already exists")
            repo.update(food, **dto.changes)
            return _to_out(repo.refresh(food))

    def delete(self, food_id: int) -> None:
        with self.rw_uow() as uow:
            repo = self._foods(uow.foods)
            food = repo.get(food_id)
            if food is None:
                raise NotFoundError("Food", food_id)
            repo.delete(food)
        logger.info(
            "food.deleted",
            extra={"event": "food.deleted", "tenant_id": self.ctx.tenant_id, "user_id": self.ctx.actor_id},
        )
