"""
Fallback error normalization for everything outside the GraphQL path.

Known error types are turned into envelopes by exception handlers (they run
inside the router). The `fallback_errors` middleware is the last line: any
other exception is logged and answered with a generic 500 envelope, so no
exception ever reaches the ASGI server.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from blog_api.errors import AppError, envelope_for

logger = logging.getLogger(__name__)


def error_response(exc: BaseException) -> JSONResponse:
    envelope = envelope_for(exc)
    return JSONResponse(status_code=envelope.status, content=envelope.to_dict())


async def _handle_app_error(request: Request, exc: Exception) -> JSONResponse:
    logger.info(
        "request_failed method=%s path=%s error=%s message=%s",
        request.method,
        request.url.path,
        type(exc).__name__,
        exc,
    )
    return error_response(exc)


async def _handle_http_error(request: Request, exc: Exception) -> JSONResponse:
    logger.info(
        "http_error method=%s path=%s status=%s",
        request.method,
        request.url.path,
        getattr(exc, "status_code", None),
    )
    return error_response(exc)


async def _handle_validation_error(request: Request, exc: Exception) -> JSONResponse:
    logger.info("invalid_request method=%s path=%s", request.method, request.url.path)
    return error_response(exc)


def add_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, _handle_app_error)
    app.add_exception_handler(StarletteHTTPException, _handle_http_error)
    app.add_exception_handler(RequestValidationError, _handle_validation_error)


async def fallback_errors(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception as exc:
        logger.exception("unhandled_error method=%s path=%s", request.method, request.url.path)
        return error_response(exc)
