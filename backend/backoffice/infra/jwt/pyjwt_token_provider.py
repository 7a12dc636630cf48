from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

import jwt

from backoffice.services._shared.errors import InvalidTokenError
from backoffice.services._shared.ports import (
    AccessToken,
    Identity,
    RefreshToken,
    TokenProvider,
    strip_volatile_claims,
)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class JWTSigner:
    """
    HMAC signer bound to one secret and one lifetime.

    :param secret: Signing key. Never shared between token types.
    :param lifetime: Validity window added to ``iat``.
    :param algorithm: PyJWT algorithm name; decoding accepts only this one.
    """

    secret: str
    lifetime: timedelta
    algorithm: str = "HS256"
    clock: Callable[[], datetime] = field(default=_utcnow, compare=False)

    def sign(self, claims: dict[str, Any]) -> tuple[str, datetime]:
        """
        Sign ``claims`` with fresh ``iat``/``exp``/``jti``.

        :returns: ``(token, expires_at)``.
        """
        now = self.clock()
        expires_at = now + self.lifetime
        payload = strip_volatile_claims(claims)
        payload.update({"iat": now, "exp": expires_at, "jti": uuid4().hex})
        token = jwt.encode(payload, self.secret, algorithm=self.algorithm)
        return token, expires_at.replace(microsecond=0)

    def verify(self, token: str) -> dict[str, Any]:
        """
        Decode and verify ``token``.

        :raises InvalidTokenError: On bad signature, expiry or malformed input.
        """
        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise InvalidTokenError("Token expired") from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError("Invalid token") from exc


class PyJWTTokenProvider(TokenProvider):
    """
    Token provider built on PyJWT with one signer per token type.

    :raises ValueError: When both signers share a secret, which would let a
        refresh token pass as an access token and vice versa.
    """

    def __init__(self, *, access: JWTSigner, refresh: JWTSigner) -> None:
        if not access.secret or not refresh.secret:
            raise ValueError("Both access and refresh secrets are required.")
        if access.secret == refresh.secret:
            raise ValueError("Access and refresh tokens must use distinct secrets.")
        self._access = access
        self._refresh = refresh

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> PyJWTTokenProvider:
        algorithm = config.get("JWT_ALGORITHM", "HS256")
        return cls(
            access=JWTSigner(
                secret=config["JWT_ACCESS_SECRET"],
                lifetime=config["JWT_ACCESS_EXPIRES"],
                algorithm=algorithm,
            ),
            refresh=JWTSigner(
                secret=config["JWT_REFRESH_SECRET"],
                lifetime=config["JWT_REFRESH_EXPIRES"],
                algorithm=algorithm,
            ),
        )

    @property
    def refresh_lifetime(self) -> timedelta:
        return self._refresh.lifetime

    def sign_access(self, identity: Identity) -> AccessToken:
        value, expires_at = self._access.sign(identity.to_claims())
        return AccessToken(value=value, expires_at=expires_at)

    def sign_refresh(self, identity: Identity) -> RefreshToken:
        value, expires_at = self._refresh.sign(identity.to_claims())
        return RefreshToken(value=value, expires_at=expires_at)

    def verify_access(self, token: str) -> Identity:
        return self._identity(self._access.verify(token))

    def verify_refresh(self, token: str) -> Identity:
        return self._identity(self._refresh.verify(token))

    @staticmethod
    def _identity(claims: dict[str, Any]) -> Identity:
        try:
            return Identity.from_claims(strip_volatile_claims(claims))
        except KeyError as exc:
            raise InvalidTokenError(f"Missing claim: {exc.args[0]}") from exc
