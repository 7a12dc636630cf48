# backoffice/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from backoffice.services._shared.ports import AccessToken, RefreshToken

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: User email (normalized by the repository).
    :param password: Raw password (to be verified).
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Encoded refresh JWT, or ``None`` when the client sent none.
    """

    refresh_token: str | None


@dataclass(frozen=True, slots=True)
class LogoutIn:
    """
    Input DTO for logout.

    :param refresh_token: Refresh JWT presented by the client, if any.
    :param revoke: Delete the server-side record for that token.
    """

    refresh_token: str | None = None
    revoke: bool = True


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """Freshly minted access/refresh pair."""

    access_token: AccessToken
    refresh_token: RefreshToken


@dataclass(frozen=True, slots=True)
class UserSummary:
    """Public projection of a user record."""

    id: str
    email: str
    name: str
    role: str
    tenant_id: str
    created_at: datetime | None = None
    tenant_name: str | None = None


@dataclass(frozen=True, slots=True)
class LoginOut:
    user: UserSummary
    tokens: TokenPairOut
