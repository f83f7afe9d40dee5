"""Central exception handlers: every failure becomes the JSON error envelope.

Order of translation: AppError (tagged) -> storage errors (SQLSTATE codes) ->
request body errors -> framework HTTP errors (incl. unmatched routes) -> 500.
"""

import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.errors import AppError, classify_database_error, internal_error, unprocessable

logger = logging.getLogger(__name__)

GENERIC_ERROR_DETAILS = "Something went wrong"


def available_endpoints(request: Request) -> dict[str, str]:
    settings = getattr(request.app.state, "settings", None)
    prefix = settings.API_PREFIX if settings is not None else "/api"
    return {"users": f"{prefix}/users", "health": "/health", "docs": "/docs"}


def _timestamp() -> str:
    return datetime.now(UTC).isoformat()


def _request_path(request: Request) -> str:
    path = request.url.path
    if request.url.query:
        path = f"{path}?{request.url.query}"
    return path


def _expose_internal(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    return bool(settings is not None and settings.expose_error_details)


def _log_error(
    request: Request,
    exc: BaseException,
    status_code: int,
    message: str,
    with_traceback: bool = True,
) -> None:
    """Log method, path, user agent, error type/message and (optionally) traceback for a failed request."""
    level = logging.ERROR if status_code >= 500 else logging.WARNING
    logger.log(
        level,
        "%s %s -> %s (user-agent=%s) %s: %s",
        request.method,
        _request_path(request),
        status_code,
        request.headers.get("user-agent", "Unknown"),
        type(exc).__name__,
        message,
        exc_info=exc if with_traceback else None,
    )


def error_response(
    request: Request,
    status_code: int,
    error: dict[str, Any],
    headers: dict[str, str] | None = None,
    **extra: Any,
) -> JSONResponse:
    """Build the error envelope {success: false, error, timestamp, path, ...extra}."""
    content: dict[str, Any] = {
        "success": False,
        "error": error,
        "timestamp": _timestamp(),
        "path": _request_path(request),
    }
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content, headers=headers)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    _log_error(request, exc, exc.status_code, exc.message)
    return error_response(request, exc.status_code, exc.to_dict(_expose_internal(request)))


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    error = classify_database_error(exc)
    _log_error(request, exc, error.status_code, str(getattr(exc, "orig", None) or exc))
    return error_response(request, error.status_code, error.to_dict(_expose_internal(request)))


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    # Summaries only: raw inputs may contain passwords.
    summary = "; ".join(
        f"{'.'.join(str(p) for p in e.get('loc', ()))}: {e.get('type')}" for e in errors
    )
    if any(e.get("type") == "json_invalid" for e in errors):
        _log_error(request, exc, 400, summary)
        return error_response(request, 400, {"message": "Invalid JSON in request body"})

    details = [
        {
            "field": ".".join(str(p) for p in e.get("loc", ())[1:]) or None,
            "message": e.get("msg", ""),
        }
        for e in errors
    ]
    error = unprocessable("Request data could not be processed", details)
    _log_error(request, exc, error.status_code, summary)
    return error_response(request, error.status_code, error.to_dict())


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    if exc.status_code == 404:
        return error_response(
            request,
            404,
            {
                "message": "Route not found",
                "details": f"{request.method} {_request_path(request)} does not exist",
            },
            availableEndpoints=available_endpoints(request),
        )
    _log_error(request, exc, exc.status_code, str(exc.detail))
    return error_response(
        request,
        exc.status_code,
        {"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    error = internal_error(details=str(exc))
    # ServerErrorMiddleware re-raises after this response, so the server logs the traceback.
    _log_error(request, exc, error.status_code, str(exc), with_traceback=False)
    body = error.to_dict(_expose_internal(request))
    body.setdefault("details", GENERIC_ERROR_DETAILS)
    return error_response(request, error.status_code, body)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all handlers; AppError and storage errors take precedence over the 500 fallback."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = [
    "available_endpoints",
    "error_response",
    "register_exception_handlers",
]
