"""Food repository, always bound to a tenant."""

from __future__ import annotations

from typing import Any

from sqlalchemy import Select
from sqlalchemy.orm import selectinload

from backoffice.models.food import Food
from backoffice.repositories.base import TenantScopedRepository


class FoodRepository(TenantScopedRepository[Food]):
    """Tenant-scoped persistence for :class:`Food`; the category is loaded with each row."""

    model = Food

    def _base_select(self) -> Select[Any]:
        return super()._base_select().options(selectinload(Food.category))

    def _sortable_fields(self):
        return {
            "id": Food.id,
            "name": Food.name,
            "price": Food.price,
            "created_at": Food.created_at,
            "updated_at": Food.updated_at,
        }

    def _filterable_fields(self):
        return {"name": Food.name, "category_id": Food.category_id}

    def _searchable_fields(self):
        return (Food.name, Food.description)

    def _updatable_fields(self):
        return {"name", "price", "description", "image_url", "category_id"}

    def name_taken(self, name: str, *, exclude_id: int | None = None) -> bool:
        """Return ``True`` when another item of this tenant uses ``name``."""
        stmt = self._base_select().where(Food.name == name)
        if exclude_id is not None:
            stmt = stmt.where(Food.id != exclude_id)
        return self.session.execute(stmt.limit(1)).first() is not None
