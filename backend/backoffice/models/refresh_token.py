"""Persisted refresh token: at most one live row per user."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backoffice.core.extensions import db

from .base import PKMixin, ReprMixin

if TYPE_CHECKING:
    from .user import User


class RefreshToken(PKMixin, ReprMixin, db.Model):
    """
    Server-side record of the current refresh token of a user.

    ``user_id`` is unique: issuing a new token overwrites the row, which is
    what invalidates every previously issued refresh token for that user.
    ``token`` is the signed JWT itself and is the lookup key of the refresh
    endpoint.
    """

    __tablename__ = "refresh_tokens"

    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    token: Mapped[str] = mapped_column(String(1024), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    user: Mapped[User] = relationship(back_populates="refresh_token")

    __table_args__ = (
        UniqueConstraint("user_id", name="uq_refresh_tokens_user_id"),
        UniqueConstraint("token", name="uq_refresh_tokens_token"),
        Index("ix_refresh_tokens_expires_at", "expires_at"),
    )
