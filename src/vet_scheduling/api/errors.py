"""
Exception handlers and request logging for the HTTP layer.

Clients always receive ``{"error": message}``; details stay in the logs.
"""

import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..exceptions import (
    VetSchedulingException,
    create_error_response,
    format_validation_errors,
    log_exception_context,
)

logger = logging.getLogger(__name__)


def _request_context(request: Request) -> dict:
    return {"method": request.method, "path": request.url.path}


async def scheduling_exception_handler(
    request: Request, exc: VetSchedulingException
) -> JSONResponse:
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    log_exception_context(exc, _request_context(request), logger, level)
    return JSONResponse(status_code=exc.status_code, content=create_error_response(exc))


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = format_validation_errors(exc.errors())
    logger.info(f"Rejected {request.method} {request.url.path}: {details}")
    return JSONResponse(
        status_code=400,
        content={"error": "Validation failed", "details": details},
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log_exception_context(exc, _request_context(request), logger)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(VetSchedulingException, scheduling_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, internal_error_handler)


def register_request_logging(app: FastAPI) -> None:
    """Log every request and report its duration in ``X-Process-Time``."""

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)

        logger.info(
            f"{request.method} {request.url.path} - "
            f"Status: {response.status_code} - "
            f"Time: {process_time:.4f}s"
        )
        return response
