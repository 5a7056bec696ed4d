"""
Shared API Middleware
======================

Request tracing, request logging and the exception handlers that turn
application errors into JSON responses.

Error mapping:
- ValidationException, malformed request -> 400
- ResourceNotFoundException -> 404
- StorageUnavailableException, anything unexpected -> 500

Every error body is ``{"error": ..., "correlation_id": ...}``, plus
``details`` for malformed requests.
"""

import time
import uuid
from typing import Any, Callable, Optional

from fastapi import Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from src.core import (
    ApplicationException,
    ValidationException,
    ResourceNotFoundException,
    StorageUnavailableException,
)
from src.shared.infrastructure.logging import (
    bind_correlation_id,
    get_logger,
    reset_correlation_id,
)

logger = get_logger(__name__)

CORRELATION_ID_HEADER = "X-Correlation-ID"


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """
    Reuses the caller's X-Correlation-ID or mints one.

    The id is echoed on the response, kept on ``request.state`` for error
    bodies and bound to the logging context for the rest of the request.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = request.headers.get(CORRELATION_ID_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id

        token = bind_correlation_id(correlation_id)
        try:
            response = await call_next(request)
        finally:
            reset_correlation_id(token)

        response.headers[CORRELATION_ID_HEADER] = correlation_id
        return response


class LoggingMiddleware(BaseHTTPMiddleware):
    """One log line per finished request, with status and latency."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start = time.perf_counter()
        context = {"method": request.method, "path": request.url.path}

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error("Request failed", extra={
                **context,
                "error": str(e),
                "response_time_ms": _elapsed_ms(start),
            })
            raise

        elapsed_ms = _elapsed_ms(start)
        response.headers["X-Response-Time"] = f"{elapsed_ms / 1000:.3f}s"
        logger.info("Request completed", extra={
            **context,
            "status_code": response.status_code,
            "response_time_ms": elapsed_ms,
        })
        return response


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def _error_response(
    request: Request,
    status_code: int,
    error: str,
    details: Optional[Any] = None
) -> JSONResponse:
    content = {
        "error": error,
        "correlation_id": getattr(request.state, "correlation_id", None),
    }
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


async def application_exception_handler(request: Request, exc: ApplicationException) -> JSONResponse:
    if isinstance(exc, ValidationException):
        return _error_response(request, 400, exc.message)

    if isinstance(exc, ResourceNotFoundException):
        return _error_response(request, 404, f"{exc.resource_type} not found")

    logger.error(exc.message, extra={
        "path": request.url.path,
        "error_type": type(exc).__name__,
        "reason": getattr(exc, "reason", None),
    })
    if isinstance(exc, StorageUnavailableException):
        return _error_response(request, 500, "Storage unavailable")
    return _error_response(request, 500, "Internal server error")


async def request_validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Unparseable bodies and non-integer ids are client errors."""
    return _error_response(
        request, 400, "Invalid request", details=jsonable_encoder(exc.errors())
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception", extra={
        "path": request.url.path,
        "error_type": type(exc).__name__,
    })
    return _error_response(request, 500, "Internal server error")
