"""Authentication endpoints: login, refresh, signout, me, register, users."""

from __future__ import annotations

from flask import Blueprint, current_app
from marshmallow import ValidationError

from backoffice.api.cookies import clear_token_cookies, set_token_cookies
from backoffice.api.deps import json_body, json_response, parse_pagination, service_errors, timing
from backoffice.api.security import (
    REFRESH_TOKEN_EXTRACTORS,
    current_identity,
    extract_token,
    require_auth,
    require_role,
    service_context,
)
from backoffice.core.auth import get_refresh_store, get_token_provider
from backoffice.core.errors import MissingCredentials
from backoffice.models.user import ROLE_ADMIN
from backoffice.schemas import (
    LoginSchema,
    LoginUserSchema,
    RegisterSchema,
    TokenPairSchema,
    UserSchema,
    build_meta,
)
from backoffice.services.auth import AuthService, LoginIn, LogoutIn, RefreshIn
from backoffice.services.users import UserListIn, UserRegisterIn, UserService

bp = Blueprint("auth", __name__)

login_schema = LoginSchema()
register_schema = RegisterSchema()
login_user_schema = LoginUserSchema()
user_schema = UserSchema()
users_schema = UserSchema(many=True)
token_schema = TokenPairSchema()


def _auth_service() -> AuthService:
    return AuthService(token_provider=get_token_provider(), refresh_store=get_refresh_store())


@bp.post("/login")
@timing
@service_errors
def login():
    """Verify credentials, then return the user and both tokens (also as cookies)."""

    try:
        data = login_schema.load(json_body())
    except ValidationError as err:
        raise MissingCredentials(details={"errors": err.messages}) from err
    result = _auth_service().login(LoginIn(email=data["email"], password=data["password"]))
    body = {"user": login_user_schema.dump(result.user), **token_schema.dump(result.tokens)}
    return set_token_cookies(json_response(body), result.tokens)


@bp.post("/refresh")
@timing
@service_errors
def refresh():
    """Rotate the refresh token (cookie first, then JSON body) into a new pair."""

    token = extract_token(REFRESH_TOKEN_EXTRACTORS)
    pair = _auth_service().refresh(RefreshIn(refresh_token=token))
    return set_token_cookies(json_response(token_schema.dump(pair)), pair)


@bp.post("/signout")
@timing
@service_errors
def signout():
    """Clear both cookies; optionally revoke the presented refresh token. Always 200."""

    token = extract_token(REFRESH_TOKEN_EXTRACTORS)
    revoke = bool(current_app.config.get("AUTH_LOGOUT_REVOKES_REFRESH", True))
    _auth_service().logout(LogoutIn(refresh_token=token, revoke=revoke))
    return clear_token_cookies(json_response({"message": "Signed out successfully"}))


@bp.get("/me")
@require_auth
@timing
@service_errors
def me():
    """Return the authenticated user's profile."""

    user = _auth_service().me(current_identity())
    return json_response({"user": user_schema.dump(user)})


@bp.post("/register")
@require_role(ROLE_ADMIN)
@timing
@service_errors
def register():
    """Create a user in the caller's tenant (admin only)."""

    data = register_schema.load(json_body())
    service = UserService(ctx=service_context())
    user = service.register(UserRegisterIn(**data))
    return json_response({"user": user_schema.dump(user)}, status=201)


@bp.get("/users")
@require_auth
@timing
@service_errors
def list_users():
    """List users of the caller's tenant."""

    p = parse_pagination()
    service = UserService(ctx=service_context())
    result = service.list_users(UserListIn(page=p.page, limit=p.limit, sort=p.sort, search=p.search))
    return json_response(
        {
            "data": users_schema.dump(result.items),
            "meta": build_meta(
                total=result.total,
                page=result.page,
                limit=result.limit,
                total_pages=result.total_pages,
            ),
        }
    )
