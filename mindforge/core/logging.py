"""Logging setup and the request logging middleware."""

import logging
import time
import uuid
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from mindforge.core.config import settings

REQUEST_ID_HEADER = "X-Request-ID"

logger = logging.getLogger("mindforge.request")


def configure_logging() -> None:
    """Configure root logging once for the API process."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # SQL echo is controlled by DB_ECHO, keep the engine logger quiet otherwise
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def request_id_of(request: Request) -> str:
    return getattr(request.state, "request_id", None) or request.headers.get(
        REQUEST_ID_HEADER, "unknown"
    )


def log_context(request: Request, **fields: Any) -> dict[str, Any]:
    """
    `extra` dict for request-scoped log lines.

    Carries the request id, route and method plus any non-empty fields.
    Never include request bodies or tokens.
    """
    context = {
        "request_id": request_id_of(request),
        "route": request.url.path,
        "method": request.method,
    }
    context.update({key: value for key, value in fields.items() if value is not None})
    return context


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Assign a request id and log each request start and completion.

    Completed requests with status >= 400 are logged at warning level.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        start = time.perf_counter()

        logger.info(
            "Incoming request %s %s",
            request.method,
            request.url.path,
            extra=log_context(request),
        )

        response = await call_next(request)

        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(
            level,
            "Request completed %s %s %s",
            request.method,
            request.url.path,
            response.status_code,
            extra=log_context(request, status_code=response.status_code, duration_ms=duration_ms),
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
