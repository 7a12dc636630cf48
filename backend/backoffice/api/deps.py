"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from flask import Response, current_app, jsonify, request

from backoffice.schemas.common import PaginationQuerySchema
from backoffice.services._shared.base import BaseService
from backoffice.services._shared.errors import ServiceError

F = TypeVar("F", bound=Callable[..., Any])


@dataclass(slots=True)
class Pagination:
    """Pagination arguments parsed from the query string."""

    page: int
    limit: int
    sort: list[str]
    search: str | None


def parse_pagination(default_limit: int = 20, max_limit: int = 100) -> Pagination:
    """Parse ``page``/``limit``/``sort``/``search`` from ``request.args``."""

    schema = PaginationQuerySchema(default_limit=default_limit, max_limit=max_limit)
    data = schema.load(request.args)
    return Pagination(
        page=data["page"], limit=data["limit"], sort=data["sort"], search=data["search"]
    )


def json_body() -> dict[str, Any]:
    """Return the JSON object body, or an empty dict for anything else."""

    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def service_errors(func: F) -> F:
    """Re-raise :class:`ServiceError` as the matching API error."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        try:
            return func(*args, **kwargs)
        except ServiceError as exc:
            raise BaseService.translate_exceptions(exc) from exc

    return wrapper  # type: ignore[return-value]


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request.endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
