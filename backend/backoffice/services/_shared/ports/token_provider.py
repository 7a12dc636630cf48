from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol

# Registered claims that change on every signing and must not seed a new token.
VOLATILE_CLAIMS = ("exp", "iat", "nbf", "jti")


@dataclass(frozen=True, slots=True)
class Identity:
    """
    Minimal claim set carried by both token types.

    Built only from a verified user record or from verified token claims,
    never from request input.
    """

    id: str
    email: str
    role: str
    tenant_id: str

    def to_claims(self) -> dict[str, Any]:
        return {"id": self.id, "email": self.email, "role": self.role, "tenantId": self.tenant_id}

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> Identity:
        """
        :raises KeyError: When a required claim is missing.
        """
        return cls(
            id=str(claims["id"]),
            email=str(claims["email"]),
            role=str(claims["role"]),
            tenant_id=str(claims["tenantId"]),
        )


def strip_volatile_claims(claims: dict[str, Any]) -> dict[str, Any]:
    """Return ``claims`` without ``exp``/``iat``/``nbf``/``jti``."""
    return {k: v for k, v in claims.items() if k not in VOLATILE_CLAIMS}


@dataclass(frozen=True, slots=True)
class AccessToken:
    """Signed access token. Only :meth:`TokenProvider.verify_access` accepts it."""

    value: str
    expires_at: datetime

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class RefreshToken:
    """Signed refresh token. Only :meth:`TokenProvider.verify_refresh` accepts it."""

    value: str
    expires_at: datetime

    def __str__(self) -> str:
        return self.value


class TokenProvider(Protocol):
    """
    Port for minting and verifying the two token types.

    ``verify_*`` raise :class:`~backoffice.services._shared.errors.InvalidTokenError`
    on bad signature, wrong algorithm, expiry or missing claims.
    """

    def sign_access(self, identity: Identity) -> AccessToken: ...

    def sign_refresh(self, identity: Identity) -> RefreshToken: ...

    def verify_access(self, token: str) -> Identity: ...

    def verify_refresh(self, token: str) -> Identity: ...
