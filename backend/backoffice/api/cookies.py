"""Token cookies: set at login/refresh, cleared at logout with identical attributes."""

from __future__ import annotations

from datetime import timedelta
from typing import Any

from flask import Response, current_app

from backoffice.api.security import ACCESS_COOKIE, REFRESH_COOKIE
from backoffice.services.auth.dto import TokenPairOut

COOKIE_PATH = "/"


def _seconds(value: timedelta | int) -> int:
    return int(value.total_seconds()) if isinstance(value, timedelta) else int(value)


def cookie_attributes() -> dict[str, Any]:
    cfg = current_app.config
    return {
        "httponly": True,
        "secure": bool(cfg.get("AUTH_COOKIE_SECURE", True)),
        "samesite": cfg.get("AUTH_COOKIE_SAMESITE", "Strict"),
        "path": COOKIE_PATH,
    }


def set_token_cookies(response: Response, pair: TokenPairOut) -> Response:
    cfg = current_app.config
    attrs = cookie_attributes()
    response.set_cookie(
        ACCESS_COOKIE,
        pair.access_token.value,
        max_age=_seconds(cfg["AUTH_ACCESS_COOKIE_MAX_AGE"]),
        **attrs,
    )
    response.set_cookie(
        REFRESH_COOKIE,
        pair.refresh_token.value,
        max_age=_seconds(cfg["JWT_REFRESH_EXPIRES"]),
        **attrs,
    )
    return response


def clear_token_cookies(response: Response) -> Response:
    attrs = cookie_attributes()
    for name in (ACCESS_COOKIE, REFRESH_COOKIE):
        response.delete_cookie(name, **attrs)
    return response
