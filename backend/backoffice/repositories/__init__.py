"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from backoffice.repositories.base import (
    BaseRepository,
    Page,
    Pagination,
    TenantScopedRepository,
    paginate_select,
)
from backoffice.repositories.category import CategoryRepository
from backoffice.repositories.food import FoodRepository
from backoffice.repositories.tenant import TenantRepository
from backoffice.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "Page",
    "Pagination",
    "TenantScopedRepository",
    "paginate_select",
    "CategoryRepository",
    "FoodRepository",
    "TenantRepository",
    "UserRepository",
]
