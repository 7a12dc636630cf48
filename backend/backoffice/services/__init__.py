"""Service layer public API.

Re-exports
----------
- Base primitives: :class:`BaseService`, :class:`ServiceContext`.
- :class:`AuthService` (login, issuance, refresh rotation, logout, me).
- :class:`UserService` (tenant-scoped registration and listing).
- :class:`CategoryService` (tenant-scoped CRUD and public category listing).
- :class:`FoodService` (tenant-scoped CRUD and public menu).
"""

from __future__ import annotations

from ._shared.base import BaseService, ServiceContext
from .auth.service import AuthService
from .categories.service import CategoryService
from .foods.service import FoodService
from .users.service import UserService

__all__ = [
    "AuthService",
    "BaseService",
    "CategoryService",
    "FoodService",
    "ServiceContext",
    "UserService",
]
