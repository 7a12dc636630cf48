"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import timedelta
from typing import Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

PLACEHOLDER_SECRETS: Final[frozenset[str]] = frozenset(
    {"CHANGE_ME", "CHANGE_ME_ACCESS", "CHANGE_ME_REFRESH"}
)

# Loads .env in development (no-op when the file is missing)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_seconds(name: str, default: timedelta) -> timedelta:
    """Read a duration expressed in whole seconds from the environment."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return timedelta(seconds=int(val))


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret used for session signing.
    JWT_ACCESS_SECRET: str
        HMAC key for access tokens. Must differ from ``JWT_REFRESH_SECRET``.
    JWT_REFRESH_SECRET: str
        HMAC key for refresh tokens.
    JWT_ALGORITHM: str
        Signing algorithm passed to PyJWT.
    JWT_ACCESS_EXPIRES: timedelta
        Access token validity window (3 days).
    JWT_REFRESH_EXPIRES: timedelta
        Refresh token validity window and server-side record lifetime (7 days).
    AUTH_ACCESS_COOKIE_MAX_AGE: timedelta
        ``Max-Age`` of the ``accessToken`` cookie. Shorter than the token
        itself so browsers fall back to the refresh flow after a day.
    AUTH_COOKIE_SECURE: bool
        Emit token cookies with the ``Secure`` attribute.
    AUTH_COOKIE_SAMESITE: str
        ``SameSite`` attribute of token cookies.
    AUTH_LOGOUT_REVOKES_REFRESH: bool
        When ``True`` logout deletes the presented refresh token server-side.
    REFRESH_TOKEN_STORE: str
        ``"sqlalchemy"`` (default) or ``"redis"``.
    REDIS_URL: str | None
        Connection URL, required when ``REFRESH_TOKEN_STORE == "redis"``.
    BCRYPT_LOG_ROUNDS: int
        Work factor for password hashing.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_ACCESS_SECRET = os.getenv("JWT_ACCESS_SECRET", "CHANGE_ME_ACCESS")
    JWT_REFRESH_SECRET = os.getenv("JWT_REFRESH_SECRET", "CHANGE_ME_REFRESH")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ACCESS_EXPIRES = env_seconds("JWT_ACCESS_EXPIRES", timedelta(days=3))
    JWT_REFRESH_EXPIRES = env_seconds("JWT_REFRESH_EXPIRES", timedelta(days=7))

    # Cookies
    AUTH_ACCESS_COOKIE_MAX_AGE = env_seconds("AUTH_ACCESS_COOKIE_MAX_AGE", timedelta(days=1))
    AUTH_COOKIE_SECURE = env_bool("AUTH_COOKIE_SECURE", True)
    AUTH_COOKIE_SAMESITE = os.getenv("AUTH_COOKIE_SAMESITE", "Strict")
    AUTH_LOGOUT_REVOKES_REFRESH = env_bool("AUTH_LOGOUT_REVOKES_REFRESH", True)

    # Refresh token store
    REFRESH_TOKEN_STORE = os.getenv("REFRESH_TOKEN_STORE", "sqlalchemy")
    REDIS_URL = os.getenv("REDIS_URL")

    # Passwords
    BCRYPT_LOG_ROUNDS = int(os.getenv("BCRYPT_LOG_ROUNDS", "12"))

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default. Cookies stay ``Secure`` unless
    ``AUTH_COOKIE_SECURE=0`` is exported for plain-http local setups.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Lowers the bcrypt work factor to keep the suite fast.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    JWT_ACCESS_SECRET = "test-access-secret"
    JWT_REFRESH_SECRET = "test-refresh-secret"
    BCRYPT_LOG_ROUNDS = 4
    REFRESH_TOKEN_STORE = "sqlalchemy"
    REDIS_URL = None
    USE_PROXYFIX = False
    PROPAGATE_EXCEPTIONS = False


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    :func:`validate_secrets` runs against this class at startup and refuses
    placeholder or shared JWT secrets.
    """

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)


def validate_secrets(config: Mapping[str, object], *, strict: bool) -> None:
    """Reject JWT secret setups that would let one token type forge the other.

    :param config: Loaded Flask configuration mapping.
    :param strict: Also reject placeholder values (production).
    :raises RuntimeError: When the secrets are missing, shared or placeholders.
    """
    access = str(config.get("JWT_ACCESS_SECRET") or "")
    refresh = str(config.get("JWT_REFRESH_SECRET") or "")
    if not access or not refresh:
        raise RuntimeError("JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must be set.")
    if access == refresh:
        raise RuntimeError("JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must differ.")
    if strict and (access in PLACEHOLDER_SECRETS or refresh in PLACEHOLDER_SECRETS):
        raise RuntimeError("Refusing to start with placeholder JWT secrets.")
