"""Tenant model: the partition boundary every resource is scoped by."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, String, UniqueConstraint, true
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from backoffice.core.extensions import db

from .base import ReprMixin, TimestampMixin, UUIDPKMixin

if TYPE_CHECKING:
    from .category import Category
    from .food import Food
    from .user import User


class Tenant(UUIDPKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Customer organization owning users and resources.

    Fields
    ------
    name : str
        Display name.
    subdomain : str
        Unique slug used by public (unauthenticated) listings.
    email : str | None
        Contact address.
    is_active : bool
        Deactivated tenants cannot log in; their users are treated as unknown.
    """

    __tablename__ = "tenants"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    subdomain: Mapped[str] = mapped_column(String(30), nullable=False)
    email: Mapped[str | None] = mapped_column(String(254), nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )

    users: Mapped[list[User]] = relationship(back_populates="tenant", cascade="all, delete-orphan")
    categories: Mapped[list[Category]] = relationship(
        back_populates="tenant", cascade="all, delete-orphan"
    )
    foods: Mapped[list[Food]] = relationship(back_populates="tenant", cascade="all, delete-orphan")

    __table_args__ = (UniqueConstraint("subdomain", name="uq_tenants_subdomain"),)

    @validates("subdomain")
    def _normalize_subdomain(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Subdomain is required.")
        v = value.strip().lower()
        if not v.isalnum():
            raise ValueError("Subdomain must be alphanumeric.")
        return v
