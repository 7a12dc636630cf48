"""
UserService
===========

Tenant-scoped user administration: registration by an admin and listing.

- The tenant is taken from :class:`ServiceContext`, never from input.
- Registration requires the ``admin`` role.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from backoffice.models.user import ROLE_ADMIN, User
from backoffice.services._shared.base import BaseService
from backoffice.services._shared.errors import (
    ConflictError,
    PermissionDeniedError,
    ServiceError,
    violates,
)
from backoffice.services.auth.dto import UserSummary
from backoffice.services.auth.service import summarize
from backoffice.services.users.dto import UserListIn, UserListOut, UserRegisterIn

logger = logging.getLogger(__name__)


class UserService(BaseService):
    """Application service for users of the caller's tenant."""

    def register(self, dto: UserRegisterIn) -> UserSummary:
        """
        Create a user in the caller's tenant.

        :raises PermissionDeniedError: If the caller is not an admin.
        :raises ConflictError: If the email is already registered (in any tenant).
        :raises ServiceError: If the password cannot be hashed (empty or over 72 bytes).
        """
        tenant_id = self.ctx.require_tenant()
        if self.ctx.role != ROLE_ADMIN:
            raise PermissionDeniedError()

        with self.rw_uow() as uow:
            if uow.users.exists_by_email(dto.email):
                raise ConflictError("User", "email already registered")
            user = User(email=dto.email, name=dto.name, role=dto.role, tenant_id=tenant_id)
            try:
                user.password = dto.password
            except ValueError as exc:
                raise ServiceError(str(exc)) from exc
            try:
                uow.users.add(user)
            except IntegrityError as exc:
                if violates(exc, "uq_users_email") or violates(exc, "users.email"):
                    raise ConflictError("User", "email already registered") from exc
                raise
            summary = summarize(user)

        logger.info(
            "user.registered",
            extra={"event": "user.registered", "user_id": summary.id, "tenant_id": tenant_id},
        )
        return summary

    def list_users(self, dto: UserListIn) -> UserListOut:
        """List users of the caller's tenant with pagination."""
        tenant_id = self.ctx.require_tenant()
        pagination = self.ensure_pagination(
            page=dto.page, limit=dto.limit, sort=dto.sort or ["-created_at"], search=dto.search
        )
        with self.ro_uow() as uow:
            page = uow.users.paginate(pagination, filters={"tenant_id": tenant_id})
            items = [summarize(u) for u in page.items]
        return UserListOut(
            items=items,
            total=page.total,
            page=page.page,
            limit=page.limit,
            total_pages=page.total_pages,
        )
