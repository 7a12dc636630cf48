# backoffice/services/auth/service.py
from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from backoffice.core.passwords import verify_password
from backoffice.models.user import User
from backoffice.services._shared.base import BaseService
from backoffice.services._shared.errors import (
    InvalidCredentialsError,
    InvalidTokenError,
    MissingCredentialsError,
    MissingRefreshTokenError,
    NotFoundError,
    SessionExpiredError,
)
from backoffice.services._shared.ports import Identity, RefreshTokenStore, TokenProvider
from backoffice.services.auth.dto import (
    LoginIn,
    LoginOut,
    LogoutIn,
    RefreshIn,
    TokenPairOut,
    UserSummary,
)

logger = logging.getLogger(__name__)


def summarize(user: User, *, with_tenant: bool = False) -> UserSummary:
    return UserSummary(
        id=user.id,
        email=user.email,
        name=user.name,
        role=user.role,
        tenant_id=user.tenant_id,
        created_at=user.created_at,
        tenant_name=user.tenant.name if with_tenant and user.tenant else None,
    )


class AuthService(BaseService):
    """
    Authentication lifecycle: login, token issuance, refresh rotation, logout.

    Tokens come from a :class:`TokenProvider` and the single live refresh token
    of each user is kept in a :class:`RefreshTokenStore`. Access tokens are
    never checked against the store.
    """

    def __init__(
        self,
        *,
        token_provider: TokenProvider,
        refresh_store: RefreshTokenStore,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """
        :param token_provider: Signs and verifies access/refresh tokens.
        :param refresh_store: Keyed store of per-user refresh records.
        :param clock: Source of "now" for store expiry checks (tests freeze it).
        """
        super().__init__()
        self.tokens = token_provider
        self.refresh_store = refresh_store
        self._clock = clock or (lambda: datetime.now(UTC))

    def now_utc(self) -> datetime:
        return self._clock()

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> LoginOut:
        """
        Verify credentials and issue a fresh token pair.

        Unknown email, inactive user, inactive tenant and wrong password all
        raise the same :class:`InvalidCredentialsError`, after the same bcrypt
        work.

        :raises MissingCredentialsError: If email or password is empty.
        :raises InvalidCredentialsError: On any verification failure.
        """
        if not dto.email or not dto.password:
            raise MissingCredentialsError()

        with self.ro_uow() as uow:
            user = uow.users.get_active_by_email(dto.email)
            stored_hash = user.password_hash if user is not None else None
            summary = summarize(user) if user is not None else None

        if not verify_password(dto.password, stored_hash) or summary is None:
            logger.info("auth.login_failed", extra={"event": "auth.login_failed"})
            raise InvalidCredentialsError()

        identity = Identity(
            id=summary.id, email=summary.email, role=summary.role, tenant_id=summary.tenant_id
        )
        tokens = self.issue(identity)
        logger.info(
            "auth.login",
            extra={"event": "auth.login", "user_id": identity.id, "tenant_id": identity.tenant_id},
        )
        return LoginOut(user=summary, tokens=tokens)

    # ------------------------------------------------------------------ #
    # Issuance
    # ------------------------------------------------------------------ #

    def issue(self, identity: Identity) -> TokenPairOut:
        """
        Mint an access/refresh pair and make the refresh token the user's only live one.

        Signing or persistence failures propagate unchanged (server error).
        """
        pair = self._mint(identity)
        self.refresh_store.upsert(identity.id, pair.refresh_token.value, pair.refresh_token.expires_at)
        return pair

    def _mint(self, identity: Identity) -> TokenPairOut:
        return TokenPairOut(
            access_token=self.tokens.sign_access(identity),
            refresh_token=self.tokens.sign_refresh(identity),
        )

    # ------------------------------------------------------------------ #
    # Refresh with rotation
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> TokenPairOut:
        """
        Exchange a live refresh token for a new pair.

        Order of checks:

        1. no token → :class:`MissingRefreshTokenError`;
        2. unknown to the store, or past ``expires_at`` → stale record removed,
           :class:`SessionExpiredError`;
        3. bad signature or expired JWT → :class:`InvalidTokenError`;
        4. compare-and-swap of the stored token; losing a concurrent refresh
           for the same user → :class:`SessionExpiredError`.
        """
        old = dto.refresh_token
        if not old:
            raise MissingRefreshTokenError()

        record = self.refresh_store.find_by_token(old)
        if record is None or record.is_expired(self.now_utc()):
            if record is not None:
                self.refresh_store.delete_by_token(old)
                logger.info(
                    "auth.session_expired",
                    extra={"event": "auth.session_expired", "user_id": record.user_id},
                )
            raise SessionExpiredError()

        try:
            identity = self.tokens.verify_refresh(old)
        except InvalidTokenError:
            logger.warning(
                "auth.refresh_invalid_signature",
                extra={"event": "auth.refresh_invalid_signature", "user_id": record.user_id},
            )
            raise

        pair = self._mint(identity)
        rotated = self.refresh_store.rotate(
            record.user_id, old, pair.refresh_token.value, pair.refresh_token.expires_at
        )
        if not rotated:
            logger.warning(
                "auth.refresh_race_lost",
                extra={"event": "auth.refresh_race_lost", "user_id": record.user_id},
            )
            raise SessionExpiredError()

        # The old value is already gone after rotate(); this only guards stray duplicates.
        self.refresh_store.delete_by_token(old)
        logger.info(
            "auth.refresh",
            extra={"event": "auth.refresh", "user_id": identity.id, "tenant_id": identity.tenant_id},
        )
        return pair

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, dto: LogoutIn) -> int:
        """
        Revoke the presented refresh token server-side when ``dto.revoke``.

        Never fails on unknown or missing tokens.

        :returns: Number of refresh records removed.
        """
        if not dto.refresh_token or not dto.revoke:
            return 0
        removed = self.refresh_store.delete_by_token(dto.refresh_token)
        logger.info("auth.logout", extra={"event": "auth.logout", "status": removed})
        return removed

    # ------------------------------------------------------------------ #
    # Current user
    # ------------------------------------------------------------------ #

    def me(self, identity: Identity) -> UserSummary:
        """
        Load the caller's own record, within the caller's tenant.

        :raises NotFoundError: If the user no longer exists.
        """
        with self.ro_uow() as uow:
            user = uow.users.get_in_tenant(identity.id, identity.tenant_id)
            if user is None:
                raise NotFoundError("User", identity.id)
            return summarize(user, with_tenant=True)
