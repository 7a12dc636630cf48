"""Menu item sold by a tenant, filed under one of its categories."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backoffice.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .category import Category
    from .tenant import Tenant


class Food(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Food item owned by a tenant.

    Fields
    ------
    name : str
        Unique per tenant.
    price : float
        Two decimal places; never negative.
    category_id : int
        Category of the same tenant. A category with items cannot be deleted.
    """

    __tablename__ = "foods"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    category_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("categories.id", ondelete="RESTRICT"), nullable=False
    )
    tenant_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False
    )

    category: Mapped[Category] = relationship(back_populates="foods")
    tenant: Mapped[Tenant] = relationship(back_populates="foods")

    __table_args__ = (
        UniqueConstraint("tenant_id", "name", name="uq_foods_tenant_id_name"),
        Index("ix_foods_tenant_id", "tenant_id"),
        Index("ix_foods_category_id", "category_id"),
    )
