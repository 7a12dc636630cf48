"""Category repository, always bound to a tenant."""

from __future__ import annotations

from backoffice.models.category import Category
from backoffice.repositories.base import TenantScopedRepository


class CategoryRepository(TenantScopedRepository[Category]):
    """Tenant-scoped persistence for :class:`Category`."""

    model = Category

    def _sortable_fields(self):
        return {
            "id": Category.id,
            "name": Category.name,
            "created_at": Category.created_at,
            "updated_at": Category.updated_at,
        }

    def _filterable_fields(self):
        return {"name": Category.name}

    def _searchable_fields(self):
        return (Category.name, Category.description)

    def _updatable_fields(self):
        return {"name", "description", "image_url"}

    def name_taken(self, name: str, *, exclude_id: int | None = None) -> bool:
        """Return ``True`` when another category of this tenant uses ``name``."""
        stmt = self._base_select().where(Category.name == name)
        if exclude_id is not None:
            stmt = stmt.where(Category.id != exclude_id)
        return self.session.execute(stmt.limit(1)).first() is not None
