"""Authentication-related Marshmallow schemas.

Fields follow the public camelCase contract; unknown keys are dropped, so a
client-supplied ``tenantId`` never reaches the service layer.
"""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, ValidationError, fields, validate

from backoffice.core.passwords import MAX_PASSWORD_BYTES
from backoffice.models.user import ROLE_USER, ROLES


def _within_bcrypt_limit(value: str) -> None:
    # bcrypt counts bytes, not characters.
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Must be at most {MAX_PASSWORD_BYTES} bytes when UTF-8 encoded.")


class LoginSchema(Schema):
    """Input payload for authenticating a user."""

    class Meta:
        unknown = EXCLUDE

    email = fields.String(required=True, validate=validate.Length(min=1, max=254))
    password = fields.String(required=True, validate=validate.Length(min=1))


class RegisterSchema(Schema):
    """Input payload for an admin creating a user in their own tenant."""

    class Meta:
        unknown = EXCLUDE

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=[validate.Length(min=6), _within_bcrypt_limit])
    name = fields.String(required=True, validate=validate.Length(min=1, max=100))
    role = fields.String(load_default=ROLE_USER, validate=validate.OneOf(ROLES))


class UserSchema(Schema):
    """Public user representation."""

    id = fields.String()
    email = fields.String()
    name = fields.String()
    role = fields.String()
    tenant_id = fields.String(data_key="tenantId")
    created_at = fields.DateTime(data_key="createdAt")
    tenant = fields.Method("get_tenant")

    def get_tenant(self, obj):
        name = getattr(obj, "tenant_name", None)
        return {"name": name} if name else None


class LoginUserSchema(Schema):
    """Subset of the user exposed in the login response."""

    email = fields.String()
    name = fields.String()
    role = fields.String()
    tenant_id = fields.String(data_key="tenantId")


class TokenPairSchema(Schema):
    access_token = fields.Function(lambda pair: pair.access_token.value, data_key="accessToken")
    refresh_token = fields.Function(lambda pair: pair.refresh_token.value, data_key="refreshToken")
