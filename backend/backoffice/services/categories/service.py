"""
CategoryService
===============

Tenant-scoped CRUD for menu categories, plus the public menu listing.

Every read and write goes through a repository bound to
``ctx.tenant_id``; a category of another tenant behaves as missing.
"""

from __future__ import annotations

import logging

from backoffice.models.category import Category
from backoffice.repositories.category import CategoryRepository
from backoffice.services._shared.base import BaseService
from backoffice.services._shared.errors import ConflictError, NotFoundError
from backoffice.services.categories.dto import (
    CategoryCreateIn,
    CategoryListIn,
    CategoryListOut,
    CategoryOut,
    CategoryUpdateIn,
)

logger = logging.getLogger(__name__)


def _to_out(category: Category) -> CategoryOut:
    return CategoryOut(
        id=category.id,
        name=category.name,
        description=category.description,
        image_url=category.image_url,
        tenant_id=category.tenant_id,
        created_at=category.created_at,
        updated_at=category.updated_at,
    )


class CategoryService(BaseService):
    """Application service for the ``Category`` aggregate."""

    def _scoped(self, repo: CategoryRepository) -> CategoryRepository:
        return repo.for_tenant(self.ctx.require_tenant())  # type: ignore[return-value]

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def list_categories(self, dto: CategoryListIn) -> CategoryListOut:
        pagination = self.ensure_pagination(
            page=dto.page, limit=dto.limit, sort=dto.sort or ["-created_at"], search=dto.search
        )
        with self.ro_uow() as uow:
            page = self._scoped(uow.categories).paginate(pagination)
            items = [_to_out(c) for c in page.items]
        return CategoryListOut(
            items=items,
            total=page.total,
            page=page.page,
            limit=page.limit,
            total_pages=page.total_pages,
        )

    def list_all(self) -> list[CategoryOut]:
        with self.ro_uow() as uow:
            return [_to_out(c) for c in self._scoped(uow.categories).list(sort=["name"])]

    def list_public(self, subdomain: str) -> list[CategoryOut]:
        """
        Categories of the active tenant published under ``subdomain``.

        :raises NotFoundError: For unknown or inactive tenants.
        """
        with self.ro_uow() as uow:
            tenant = uow.tenants.get_by_subdomain(subdomain)
            if tenant is None:
                raise NotFoundError("Tenant", subdomain)
            repo = uow.categories.for_tenant(tenant.id)
            return [_to_out(c) for c in repo.list(sort=["name"])]

    # ------------------------------------------------------------------ #
    # Commands
    # ------------------------------------------------------------------ #

    def create(self, dto: CategoryCreateIn) -> CategoryOut:
        """
        :raises ConflictError: If the tenant already has a category with that name.
        """
        with self.rw_uow() as uow:
            repo = self._scoped(uow.categories)
            if repo.name_taken(dto.name):
                raise ConflictError("Category", "name already exists")
            category = repo.add(
                Category(name=dto.name, description=dto.description, image_url=dto.image_url)
            )
            out = _to_out(category)
        logger.info(
            "category.created",
            extra={"event": "category.created", "tenant_id": out.tenant_id, "user_id": self.ctx.actor_id},
        )
        return out

    def update(self, dto: CategoryUpdateIn) -> CategoryOut:
        """
        :raises NotFoundError: If the id does not exist in the caller's tenant.
        :raises ConflictError: If renaming onto an existing name.
        """
        with self.rw_uow() as uow:
            repo = self._scoped(uow.categories)
            category = repo.get(dto.category_id)
            if category is None:
                raise NotFoundError("Category", dto.category_id)
            new_name = dto.changes.get("name")
            if new_name and repo.name_taken(new_name, exclude_id=category.id):
                raise ConflictError("Category", "name already exists")
            repo.update(category, **dto.changes)
            # ``updated_at`` is set by the database during the flush.
            return _to_out(repo.refresh(category))

    def delete(self, category_id: int) -> None:
        """
        :raises NotFoundError: If the id does not exist in the caller's tenant.
        :raises ConflictError: While food items still reference the category.
        """
        with self.rw_uow() as uow:
            repo = self._scoped(uow.categories)
            category = repo.get(category_id)
            if category is None:
                raise NotFoundError("Category", category_id)
            if uow.foods.for_tenant(repo.tenant_id).exists(category_id=category.id):
                raise ConflictError("Category", "food items still use this category")
            repo.delete(category)
        logger.info(
            "category.deleted",
            extra={"event": "category.deleted", "tenant_id": self.ctx.tenant_id, "user_id": self.ctx.actor_id},
        )
