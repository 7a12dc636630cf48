"""
Unit of Work contract shared by the auth and tenant services.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from backoffice.repositories import (
        CategoryRepository,
        FoodRepository,
        TenantRepository,
        UserRepository,
    )


class UnitOfWork(ABC):
    """
    One transactional boundary per use-case.

    Every repository attribute shares the same session. ``categories`` and
    ``foods`` are unscoped until a service binds them to the caller's tenant.

    Read-only implementations set ``read_only`` and refuse to commit; the
    refresh token store is not part of any unit of work (it commits on its
    own so a token is durable before it reaches a client).
    """

    read_only: ClassVar[bool] = False

    users: UserRepository
    tenants: TenantRepository
    categories: CategoryRepository
    foods: FoodRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...
    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...
    @abstractmethod
    def commit(self) -> None: ...
    @abstractmethod
    def rollback(self) -> None: ...
