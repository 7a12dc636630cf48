from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class FoodCreateIn:
    name: str
    price: float
    category_id: int
    description: str | None = None
    image_url: str | None = None


@dataclass(frozen=True, slots=True)
class FoodUpdateIn:
    """
    Partial update.

    :param food_id: Target id, resolved inside the caller's tenant.
    :param changes: Only the fields the client actually sent.
    """

    food_id: int
    changes: dict[str, Any]


@dataclass(frozen=True, slots=True)
class FoodListIn:
    page: int = 1
    limit: int = 10
    sort: list[str] = field(default_factory=list)
    search: str | None = None


@dataclass(frozen=True, slots=True)
class FoodCategoryOut:
    id: int
    name: str


@dataclass(frozen=True, slots=True)
class FoodOut:
    id: int
    name: str
    price: float
    description: str | None
    image_url: str | None
    category_id: int
    category: FoodCategoryOut | None
    tenant_id: str
    created_at: datetime | None
    updated_at: datetime | None


@dataclass(frozen=True, slots=True)
class FoodListOut:
    items: list[FoodOut]
    total: int
    page: int
    limit: int
    total_pages: int


@dataclass(frozen=True, slots=True)
class PublicMenuOut:
    """Menu of one tenant, as shown to anonymous visitors."""

    tenant_id: str
    tenant_name: str
    items: list[FoodOut]
