"""Application error type and the FastAPI handlers that render it.

Every failure leaves the API as the standard envelope:

    {"status": "fail" | "error", "message": "...", "requestId": "..."}

`fail` is used for 4xx client errors, `error` for everything else.
"""

import logging

import sentry_sdk
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

from mindforge.core.config import settings
from mindforge.core.logging import log_context, request_id_of

logger = logging.getLogger(__name__)

DATABASE_UNAVAILABLE_MESSAGE = (
    "Database connection failed. Please ensure the database server is running."
)


class AppError(Exception):
    """
    Operational error raised by services and dependencies.

    Carries the HTTP status code and a client-facing message.
    """

    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.is_operational = True

    @property
    def status(self) -> str:
        return "fail" if 400 <= self.status_code < 500 else "error"

    def __repr__(self) -> str:
        return f"AppError({self.status_code}, {self.message!r})"


def bad_request(message: str) -> AppError:
    return AppError(message, status.HTTP_400_BAD_REQUEST)


def unauthorized(message: str = "Authentication required") -> AppError:
    return AppError(message, status.HTTP_401_UNAUTHORIZED)


def forbidden(message: str) -> AppError:
    return AppError(message, status.HTTP_403_FORBIDDEN)


def not_found(message: str) -> AppError:
    return AppError(message, status.HTTP_404_NOT_FOUND)


def service_unavailable(message: str = DATABASE_UNAVAILABLE_MESSAGE) -> AppError:
    return AppError(message, status.HTTP_503_SERVICE_UNAVAILABLE)


def _error_body(request: Request, status_code: int, message: str, **extra) -> dict:
    body = {
        "status": "fail" if 400 <= status_code < 500 else "error",
        "message": message,
        **extra,
        "requestId": request_id_of(request),
    }
    return body


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "Request error: %s",
        exc.message,
        extra={"status_code": exc.status_code, **log_context(request)},
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, exc.status_code, exc.message),
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({"field": ".".join(loc) or "body", "message": err.get("msg", "")})
    logger.warning(
        "Invalid input data",
        extra={"fields": [e["field"] for e in errors], **log_context(request)},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(
            request, status.HTTP_400_BAD_REQUEST, "Invalid input data", errors=errors
        ),
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, exc.status_code, message),
        headers=getattr(exc, "headers", None),
    )


async def database_error_handler(request: Request, exc: OperationalError) -> JSONResponse:
    logger.error(
        "Database unavailable: %s", exc.__class__.__name__, extra=log_context(request)
    )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=_error_body(
            request, status.HTTP_503_SERVICE_UNAVAILABLE, DATABASE_UNAVAILABLE_MESSAGE
        ),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", extra=log_context(request))
    if settings.SENTRY_DSN:
        with sentry_sdk.new_scope() as scope:
            scope.set_tag("path", request.url.path)
            scope.set_tag("method", request.method)
            scope.set_tag("request_id", request_id_of(request))
            sentry_sdk.capture_exception(exc)

    extra = {"detail": repr(exc)} if settings.ENV == "dev" else {}
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(
            request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", **extra
        ),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the envelope-producing handlers on the app."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(OperationalError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
