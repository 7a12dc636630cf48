"""JSON logging with request correlation and caller identity.

Every record emitted while a request is active carries ``request_id`` and,
once the access token was verified, the caller's ``user_id`` and
``tenant_id``. Values passed through ``extra={...}`` win over those defaults.
Keys that could hold credentials are never rendered.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import IO, Any
from uuid import uuid4

from flask import Flask, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
CORRELATION_HEADERS = (REQUEST_ID_HEADER, "X-Correlation-ID")

# Attributes copied from ``extra={...}`` into the JSON payload when present.
EXTRA_KEYS = ("event", "user_id", "tenant_id", "endpoint", "elapsed_ms", "status")
REDACTED_KEYS = frozenset({"password", "token", "access_token", "refresh_token"})


class JSONFormatter(logging.Formatter):
    """Render log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        for key in EXTRA_KEYS:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class RequestContextFilter(logging.Filter):
    """Stamp request id and verified identity onto records; drop credential extras."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key in REDACTED_KEYS & record.__dict__.keys():
            delattr(record, key)
        if not has_request_context():
            record.request_id = getattr(record, "request_id", None)
            return True
        record.request_id = ensure_request_id()
        identity = g.get("identity")
        if identity is not None:
            if getattr(record, "user_id", None) is None:
                record.user_id = identity.id
            if getattr(record, "tenant_id", None) is None:
                record.tenant_id = identity.tenant_id
        return True


def ensure_request_id() -> str:
    """Return the current request identifier, adopting or generating one."""

    if not has_request_context():
        return str(uuid4())
    request_id = g.get("request_id")
    if request_id:
        return request_id
    for header in CORRELATION_HEADERS:
        value = request.headers.get(header)
        if value:
            g.request_id = value
            return value
    g.request_id = str(uuid4())
    return g.request_id


def configure_logging(level: str | int = "INFO", *, stream: IO[str] | None = None) -> None:
    """Install a single JSON handler on the root logger."""

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(RequestContextFilter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        level = resolved if isinstance(resolved, int) else logging.INFO
    root.setLevel(level)


def init_app(app: Flask) -> None:
    """Seed a request id per request and echo it on every response."""

    app.logger.addFilter(RequestContextFilter())

    @app.before_request
    def _seed_request_id() -> None:
        # ``g`` can outlive a request when an app context was pushed first.
        g.pop("request_id", None)
        ensure_request_id()

    @app.after_request
    def _echo_request_id(response):
        response.headers.setdefault(REQUEST_ID_HEADER, ensure_request_id())
        return response


__all__ = [
    "JSONFormatter",
    "RequestContextFilter",
    "configure_logging",
    "ensure_request_id",
    "init_app",
]
