"""Request authentication: token extraction chains and route guards.

A token is looked up by trying each extractor of a chain in order and keeping
the first non-empty value. Access tokens are verified cryptographically only;
the refresh store is never consulted here.
"""

from __future__ import annotations

import functools
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from flask import Request, g, request

from backoffice.core.auth import get_token_provider
from backoffice.core.errors import Forbidden, InvalidOrExpiredToken, Unauthenticated
from backoffice.core.logger import ensure_request_id
from backoffice.services._shared.base import ServiceContext
from backoffice.services._shared.errors import InvalidTokenError
from backoffice.services._shared.ports import Identity

F = TypeVar("F", bound=Callable[..., Any])
Extractor = Callable[[Request], str | None]

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"
REFRESH_BODY_FIELD = "refreshToken"


# ------------------------------- Extractors ----------------------------------


def from_cookie(name: str) -> Extractor:
    def extract(req: Request) -> str | None:
        return req.cookies.get(name) or None

    extract.__name__ = f"cookie:{name}"
    return extract


def from_bearer_header(req: Request) -> str | None:
    scheme, _, value = req.headers.get("Authorization", "").partition(" ")
    if scheme.lower() != "bearer":
        return None
    return value.strip() or None


def from_json_body(field: str) -> Extractor:
    def extract(req: Request) -> str | None:
        payload = req.get_json(silent=True)
        if not isinstance(payload, dict):
            return None
        value = payload.get(field)
        return value if isinstance(value, str) and value else None

    extract.__name__ = f"body:{field}"
    return extract


ACCESS_TOKEN_EXTRACTORS: tuple[Extractor, ...] = (from_cookie(ACCESS_COOKIE), from_bearer_header)
REFRESH_TOKEN_EXTRACTORS: tuple[Extractor, ...] = (
    from_cookie(REFRESH_COOKIE),
    from_json_body(REFRESH_BODY_FIELD),
)


def extract_token(extractors: Iterable[Extractor], req: Request | None = None) -> str | None:
    """Return the first token found by ``extractors``, or ``None``."""
    req = req if req is not None else request
    for extractor in extractors:
        token = extractor(req)
        if token:
            return token
    return None


# ------------------------------ Authenticator --------------------------------


def authenticate(extractors: Iterable[Extractor] = ACCESS_TOKEN_EXTRACTORS) -> Identity:
    """
    Verify the access token of the current request and store its identity on ``g``.

    :raises Unauthenticated: No token in any carrier (401).
    :raises InvalidOrExpiredToken: Bad signature or expired token (403).
    """
    token = extract_token(extractors)
    if not token:
        raise Unauthenticated()
    try:
        identity = get_token_provider().verify_access(token)
    except InvalidTokenError as exc:
        raise InvalidOrExpiredToken() from exc
    g.identity = identity
    return identity


def current_identity() -> Identity:
    """Identity attached by :func:`require_auth`."""
    identity = g.get("identity")
    if identity is None:
        raise Unauthenticated()
    return identity


def service_context() -> ServiceContext:
    """Service context of the authenticated caller; the tenant comes from the token only."""
    return ServiceContext.from_identity(current_identity(), request_id=ensure_request_id())


def require_auth(func: F) -> F:
    """Reject the request unless it carries a valid access token."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        authenticate()
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def require_role(role: str) -> Callable[[F], F]:
    """Like :func:`require_auth`, and also require the ``role`` claim."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            identity = authenticate()
            if identity.role != role:
                raise Forbidden("Insufficient role")
            return func(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator
