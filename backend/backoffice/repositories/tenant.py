"""Tenant repository."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select

from backoffice.models.tenant import Tenant
from backoffice.repositories.base import BaseRepository


class TenantRepository(BaseRepository[Tenant]):
    model = Tenant

    def _sortable_fields(self):
        return {"name": Tenant.name, "subdomain": Tenant.subdomain, "created_at": Tenant.created_at}

    def _filterable_fields(self):
        return {"subdomain": Tenant.subdomain, "is_active": Tenant.is_active}

    def get_by_subdomain(self, subdomain: str, *, active_only: bool = True) -> Tenant | None:
        """Resolve a tenant from its public slug (case-insensitive)."""
        stmt = select(Tenant).where(Tenant.subdomain == subdomain.strip().lower())
        if active_only:
            stmt = stmt.where(Tenant.is_active.is_(True))
        return cast(Tenant | None, self.session.execute(stmt).scalars().first())
