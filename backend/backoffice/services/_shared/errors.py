"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic**: no Flask, no HTTP. The
translation to RFC 7807 responses happens in
``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """Return ``True`` when ``exc`` names ``constraint_name`` in its driver message."""
    message = str(exc.orig).lower() if exc.orig else ""
    return constraint_name.lower() in message


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """Base class for all service-level errors."""


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found (or belongs to another tenant).

    :param entity: Entity name (e.g., "Category").
    :param key: Identifier or search key.
    """

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :param detail: Short human-readable explanation.
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return f"Conflict on {self.entity}: {self.detail}"


class PermissionDeniedError(ServiceError):
    """Raised when the caller's role does not allow the operation."""

    def __init__(self, message: str = "You do not have permission to perform this action") -> None:
        super().__init__(message)


# --------------------------------------------------------------------------- #
# Authentication
# --------------------------------------------------------------------------- #


class AuthError(ServiceError):
    """Base class for authentication failures."""


class MissingCredentialsError(AuthError):
    """Login called without email or password."""


class InvalidCredentialsError(AuthError):
    """
    Any login failure: unknown email, disabled account or wrong password.

    Deliberately carries no detail so callers cannot tell the cases apart.
    """


class UnauthenticatedError(AuthError):
    """A protected operation received no access token."""


class InvalidTokenError(AuthError):
    """A token failed signature, algorithm or expiry verification."""


class MissingRefreshTokenError(AuthError):
    """The refresh operation received no refresh token."""


class SessionExpiredError(AuthError):
    """The refresh token is unknown to the store, expired, or lost a rotation race."""
