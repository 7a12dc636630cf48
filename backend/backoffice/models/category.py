"""Menu category: example of a tenant-scoped resource."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backoffice.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .food import Food
    from .tenant import Tenant


class Category(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """Food/menu category owned by a tenant. Names are unique per tenant."""

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    tenant_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False
    )

    tenant: Mapped[Tenant] = relationship(back_populates="categories")
    foods: Mapped[list[Food]] = relationship(back_populates="category", passive_deletes=True)

    __table_args__ = (
        UniqueConstraint("tenant_id", "name", name="uq_categories_tenant_id_name"),
        Index("ix_categories_tenant_id", "tenant_id"),
    )
