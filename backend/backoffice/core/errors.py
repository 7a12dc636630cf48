"""RFC 7807 problem responses for every error the API can return.

Each :class:`APIError` subclass fixes an HTTP status and a stable ``code``;
clients branch on ``code``, never on ``detail``. Token failures answer 403
and only a request with no token at all answers 401.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any, ClassVar

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from backoffice.core.logger import ensure_request_id

log = logging.getLogger(__name__)

# Canonical codes for framework-raised HTTP errors (404 routing, 405, 413...).
HTTP_STATUS_CODES: dict[int, str] = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    413: "payload_too_large",
    415: "unsupported_media_type",
    422: "unprocessable_entity",
    429: "too_many_requests",
    500: "internal_server_error",
    503: "service_unavailable",
}


def problem_response(
    status: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
    *,
    log_exc: bool = False,
) -> tuple[Response, int]:
    """
    Build an ``application/problem+json`` response.

    :param status: HTTP status code.
    :param code: Stable machine-readable error code.
    :param message: Client-safe summary, rendered as ``detail``.
    :param details: Optional structured context (validation messages, ...).
    :param log_exc: Attach the exception being handled to the log record.
    :returns: ``(response, status)`` ready to be returned by a handler.
    """
    status = int(status)
    problem: dict[str, Any] = {
        "type": "about:blank",
        "title": HTTPStatus(status).phrase,
        "status": status,
        "detail": message,
        "instance": request.path if request else None,
        "code": code,
    }
    if details:
        problem["details"] = details
    problem["request_id"] = ensure_request_id()

    log.log(
        logging.ERROR if status >= 500 else logging.WARNING,
        "api.error code=%s status=%s",
        code,
        status,
        extra={"event": "api.error", "status": status},
        exc_info=log_exc or status >= 500,
    )

    resp = jsonify(problem)
    resp.mimetype = "application/problem+json"
    return resp, status


class APIError(Exception):
    """
    Base class for errors rendered as RFC 7807 problems.

    Subclasses set ``status_code``, ``code`` and ``default_message``; the
    constructor can override any of them per instance.
    """

    status_code: ClassVar[int] = HTTPStatus.BAD_REQUEST
    code: ClassVar[str] = "bad_request"
    default_message: ClassVar[str] = "Bad request"

    def __init__(
        self,
        message: str | None = None,
        *,
        status_code: int | None = None,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)
        if status_code is not None:
            self.status_code = int(status_code)  # type: ignore[misc]
        if code is not None:
            self.code = code  # type: ignore[misc]
        self.details = details or {}

    def to_response(self) -> tuple[Response, int]:
        return problem_response(self.status_code, self.code, self.message, self.details)


class NotFound(APIError):
    status_code = HTTPStatus.NOT_FOUND
    code = "not_found"
    default_message = "Resource not found"


class Conflict(APIError):
    status_code = HTTPStatus.CONFLICT
    code = "conflict"
    default_message = "Conflict"


class Forbidden(APIError):
    """Authenticated, but the role does not allow the operation."""

    status_code = HTTPStatus.FORBIDDEN
    code = "forbidden"
    default_message = "Forbidden"


# ------------------------------ Authentication --------------------------------


class MissingCredentials(APIError):
    """Login without email or password."""

    code = "missing_credentials"
    default_message = "Please provide email and password"


class InvalidCredentials(APIError):
    """Every login failure, whichever check rejected it."""

    code = "invalid_credentials"
    default_message = "Invalid email or password"


class Unauthenticated(APIError):
    """No access token in any carrier."""

    status_code = HTTPStatus.UNAUTHORIZED
    code = "unauthenticated"
    default_message = "Unauthorized"


class InvalidOrExpiredToken(APIError):
    status_code = HTTPStatus.FORBIDDEN
    code = "invalid_token"
    default_message = "Invalid or Expired Token"


class MissingRefreshToken(APIError):
    status_code = HTTPStatus.FORBIDDEN
    code = "missing_refresh_token"
    default_message = "Refresh token is required"


class SessionExpired(APIError):
    """Refresh token unknown to the store, past its expiry, or already rotated."""

    status_code = HTTPStatus.FORBIDDEN
    code = "session_expired"
    default_message = "Session expired. Please log in again."


def init_app(app: Flask) -> None:
    """
    Register problem+json handlers on ``app``.

    Notes
    -----
    - Every handled error carries the request's ``request_id``.
    - Database and unexpected errors never leak driver messages or tracebacks
      to clients; they are logged with ``exc_info`` instead.
    """

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        return err.to_response()

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        code = HTTP_STATUS_CODES.get(status, "error")
        if status == HTTPStatus.NOT_FOUND:
            message = f"Route '{request.path}' not found"
        else:
            message = (err.description or code.replace("_", " ").capitalize()).strip()
        return problem_response(status, code, message)

    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        return problem_response(
            HTTPStatus.UNPROCESSABLE_ENTITY,
            "validation_error",
            "Validation failed",
            {"errors": err.messages},
        )

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        return problem_response(HTTPStatus.CONFLICT, "conflict", "Resource conflict", log_exc=True)

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        return problem_response(
            HTTPStatus.SERVICE_UNAVAILABLE, "service_unavailable", "Service temporarily unavailable"
        )

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        return problem_response(
            HTTPStatus.INTERNAL_SERVER_ERROR,
            "internal_server_error",
            "Something went wrong. Please try again.",
        )
