from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from backoffice.core import errors as api_errors
from backoffice.repositories.base import Pagination
from backoffice.services._shared.errors import (
    ConflictError,
    InvalidCredentialsError,
    InvalidTokenError,
    MissingCredentialsError,
    MissingRefreshTokenError,
    NotFoundError,
    PermissionDeniedError,
    ServiceError,
    SessionExpiredError,
    UnauthenticatedError,
)
from backoffice.uow.sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork

if TYPE_CHECKING:
    from backoffice.services._shared.ports.token_provider import Identity

MAX_PAGE_SIZE = 100


@dataclass(slots=True, frozen=True)
class ServiceContext:
    """
    Cross-cutting request-scoped data.

    :param actor_id: Authenticated user identifier.
    :param tenant_id: Tenant every scoped read and write is restricted to.
    :param role: Role claim of the caller.
    :param request_id: Correlation id for logging.
    """

    actor_id: str | None = None
    tenant_id: str | None = None
    role: str | None = None
    request_id: str | None = None

    @classmethod
    def from_identity(cls, identity: Identity, *, request_id: str | None = None) -> ServiceContext:
        """Build a context from verified access-token claims."""
        return cls(
            actor_id=identity.id,
            tenant_id=identity.tenant_id,
            role=identity.role,
            request_id=request_id,
        )

    def require_tenant(self) -> str:
        """
        :raises UnauthenticatedError: When no tenant is attached to the context.
        """
        if not self.tenant_id:
            raise UnauthenticatedError("Authenticated tenant required")
        return self.tenant_id


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide read-only and read-write units of work.
    * Centralize translation of service errors into API errors.
    * Offer shared pagination clamping.

    Services never touch the global session directly; they go through a UoW.
    """

    def __init__(self, *, ctx: ServiceContext | None = None) -> None:
        self.ctx = ctx or ServiceContext()

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork()

    def ro_uow(self) -> SQLAlchemyReadOnlyUnitOfWork:
        return SQLAlchemyReadOnlyUnitOfWork()

    # ----------------------- Validation utilities ---------------------------

    def ensure_pagination(
        self,
        *,
        page: int,
        limit: int,
        sort: Iterable[str] | None = None,
        search: str | None = None,
    ) -> Pagination:
        """Build a :class:`Pagination` with ``page >= 1`` and ``1 <= limit <= 100``."""
        page = max(1, int(page))
        limit = min(max(1, int(limit)), MAX_PAGE_SIZE)
        return Pagination(page=page, limit=limit, sort=list(sort or []), search=search or None)

    # -------------------------- Error handling ------------------------------

    @staticmethod
    def translate_exceptions(exc: Exception) -> Exception:
        """
        Map a service-level error to the API error the client should see.

        Messages of auth errors are replaced by the fixed client-facing ones,
        so nothing a service attaches to them leaks out. Anything that is not
        a :class:`ServiceError` is returned untouched.
        """
        for service_error, api_error, keep_message in _TRANSLATIONS:
            if isinstance(exc, service_error):
                return api_error(str(exc)) if keep_message else api_error()
        if isinstance(exc, ServiceError):
            return api_errors.APIError(str(exc))
        return exc


# (service error, API error, forward the service message)
_TRANSLATIONS: tuple[tuple[type[ServiceError], type[api_errors.APIError], bool], ...] = (
    (MissingCredentialsError, api_errors.MissingCredentials, False),
    (InvalidCredentialsError, api_errors.InvalidCredentials, False),
    (UnauthenticatedError, api_errors.Unauthenticated, False),
    (InvalidTokenError, api_errors.InvalidOrExpiredToken, False),
    (MissingRefreshTokenError, api_errors.MissingRefreshToken, False),
    (SessionExpiredError, api_errors.SessionExpired, False),
    (PermissionDeniedError, api_errors.Forbidden, True),
    (NotFoundError, api_errors.NotFound, True),
    (ConflictError, api_errors.Conflict, True),
)
