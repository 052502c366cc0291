"""
Domain exceptions and the handlers that turn them into JSON error bodies.
Every error response is {"message": ...}; validation errors add "details".
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Validation error"


class UnauthenticatedError(AppError):
    status_code = 401
    default_message = "Not authenticated"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class ConflictError(AppError):
    status_code = 409
    default_message = "Profile was modified concurrently; retry the request"


class PersistenceError(AppError):
    status_code = 500
    default_message = "Database error"


class UpstreamServiceError(AppError):
    """AI service unreachable, timed out or returned a malformed payload. Recovered by callers."""

    status_code = 502
    default_message = "Upstream service unavailable"


def _body(message: str, details: Any = None) -> dict:
    body: dict[str, Any] = {"message": message}
    if details is not None:
        body["details"] = details
    return body


def _field_name(loc: tuple) -> str:
    parts = [str(p) for p in loc if p not in ("body", "query", "path")]
    return ".".join(parts) or "body"


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=_body(exc.message, exc.details))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"field": _field_name(tuple(err.get("loc", ()))), "message": err.get("msg", "Invalid value")}
        for err in exc.errors()
    ]
    first = details[0] if details else {"field": "body", "message": "Invalid request"}
    message = f"Validation error: {first['field']}: {first['message']}"
    return JSONResponse(status_code=400, content=_body(message, details))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Database error on %s %s", request.method, request.url.path)
    message = PersistenceError.default_message
    if settings.debug:
        message += f": {type(exc).__name__}"
    return JSONResponse(status_code=500, content=_body(message))


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    # Must stay sync: SlowAPIMiddleware calls it without awaiting
    response = JSONResponse(status_code=429, content=_body(f"Rate limit exceeded: {exc.detail}"))
    limiter = getattr(request.app.state, "limiter", None)
    if limiter is None:
        return response
    return limiter._inject_headers(response, getattr(request.state, "view_rate_limit", None))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    message = AppError.default_message
    if settings.debug:
        message += f": {type(exc).__name__}"
    return JSONResponse(status_code=500, content=_body(message))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_error_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
