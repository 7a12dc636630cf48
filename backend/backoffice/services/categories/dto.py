from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class CategoryCreateIn:
    name: str
    description: str | None = None
    image_url: str | None = None


@dataclass(frozen=True, slots=True)
class CategoryUpdateIn:
    """
    Partial update.

    :param category_id: Target id, resolved inside the caller's tenant.
    :param changes: Only the fields the client actually sent.
    """

    category_id: int
    changes: dict[str, Any]


@dataclass(frozen=True, slots=True)
class CategoryListIn:
    page: int = 1
    limit: int = 20
    sort: list[str] = field(default_factory=list)
    search: str | None = None


@dataclass(frozen=True, slots=True)
class CategoryOut:
    id: int
    name: str
    description: str | None
    image_url: str | None
    tenant_id: str
    created_at: datetime | None
    updated_at: datetime | None


@dataclass(frozen=True, slots=True)
class CategoryListOut:
    items: list[CategoryOut]
    total: int
    page: int
    limit: int
    total_pages: int
