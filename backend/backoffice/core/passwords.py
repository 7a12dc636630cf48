"""bcrypt password hashing helpers."""

from __future__ import annotations

import bcrypt
from flask import current_app, has_app_context

DEFAULT_ROUNDS = 12
# bcrypt only looks at the first 72 bytes; longer inputs are rejected outright.
MAX_PASSWORD_BYTES = 72

_dummy_hash: bytes | None = None


def _rounds() -> int:
    if has_app_context():
        return int(current_app.config.get("BCRYPT_LOG_ROUNDS", DEFAULT_ROUNDS))
    return DEFAULT_ROUNDS


def hash_password(raw: str) -> str:
    """
    Hash ``raw`` with a fresh salt.

    :param raw: Plain text password.
    :returns: Encoded bcrypt hash (``$2b$...``).
    :raises ValueError: When the password is empty or longer than 72 bytes.
    """
    if not isinstance(raw, str) or not raw:
        raise ValueError("Password must be a non-empty string.")
    encoded = raw.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise ValueError("Password must be at most 72 bytes long.")
    return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=_rounds())).decode("utf-8")


def verify_password(raw: str, hashed: str | None) -> bool:
    """
    Compare ``raw`` against ``hashed`` with bcrypt's constant-time check.

    When ``hashed`` is ``None`` (unknown or inactive account) the comparison
    still runs against a dummy hash so both outcomes cost the same.

    :param raw: Candidate password.
    :param hashed: Stored bcrypt hash, or ``None``.
    :returns: ``True`` only for a real hash that matches.
    """
    global _dummy_hash
    encoded = (raw or "").encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        # Stored passwords never exceed the limit, so this cannot match.
        hashed = None
        encoded = encoded[:MAX_PASSWORD_BYTES]
    if hashed is None:
        if _dummy_hash is None:
            _dummy_hash = bcrypt.hashpw(b"not-a-real-password", bcrypt.gensalt(rounds=_rounds()))
        bcrypt.checkpw(encoded, _dummy_hash)
        return False
    try:
        return bcrypt.checkpw(encoded, hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False
