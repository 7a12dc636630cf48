"""User repository: lookups used by login, registration and listings."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select

from backoffice.models.tenant import Tenant
from backoffice.models.user import User
from backoffice.repositories.base import BaseRepository


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    Never issues tokens or touches sessions; authentication decisions belong
    to :class:`~backoffice.services.auth.service.AuthService`.
    """

    model = User

    def _sortable_fields(self):
        return {
            "email": User.email,
            "name": User.name,
            "role": User.role,
            "created_at": User.created_at,
        }

    def _filterable_fields(self):
        return {"email": User.email, "role": User.role, "tenant_id": User.tenant_id}

    def _searchable_fields(self):
        return (User.email, User.name)

    def _updatable_fields(self):
        return {"name", "role", "is_active"}

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by email (case-insensitive), whatever its status."""
        stmt = select(User).where(User.email == normalize_email(email))
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def get_active_by_email(self, email: str) -> User | None:
        """Fetch a user that may log in: active user of an active tenant.

        :returns: ``None`` for unknown emails and for disabled accounts alike.
        """
        stmt = (
            select(User)
            .join(Tenant, Tenant.id == User.tenant_id)
            .where(
                User.email == normalize_email(email),
                User.is_active.is_(True),
                Tenant.is_active.is_(True),
            )
        )
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_by_email(self, email: str) -> bool:
        stmt = select(User.id).where(User.email == normalize_email(email))
        return self.session.execute(stmt).first() is not None

    def get_in_tenant(self, user_id: str, tenant_id: str) -> User | None:
        stmt = select(User).where(User.id == user_id, User.tenant_id == tenant_id)
        return cast(User | None, self.session.execute(stmt).scalars().first())
