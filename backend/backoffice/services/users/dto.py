from __future__ import annotations

from dataclasses import dataclass, field

from backoffice.services.auth.dto import UserSummary


@dataclass(frozen=True, slots=True)
class UserRegisterIn:
    """
    Input DTO for registering a user in the caller's tenant.

    There is no tenant field: the tenant always comes from the service context.
    """

    email: str
    password: str
    name: str
    role: str = "user"


@dataclass(frozen=True, slots=True)
class UserListIn:
    page: int = 1
    limit: int = 20
    sort: list[str] = field(default_factory=list)
    search: str | None = None


@dataclass(frozen=True, slots=True)
class UserListOut:
    items: list[UserSummary]
    total: int
    page: int
    limit: int
    total_pages: int
