"""Service errors and their mapping onto empty-body HTTP responses.

Components raise the subclasses below; the handlers registered by
``register_exception_handlers`` turn them into bare status codes. No error
text is ever sent back to the client.
"""
from __future__ import annotations

import logging
from typing import Dict, Optional

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, reason: str = "", headers: Optional[Dict[str, str]] = None):
        super().__init__(reason)
        self.reason = reason
        self.headers = headers or {}


class BadRequest(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class MethodNotAllowed(ServiceError):
    status_code = status.HTTP_405_METHOD_NOT_ALLOWED

    def __init__(self, allow: str = "", reason: str = ""):
        super().__init__(reason, headers={"Allow": allow} if allow else None)


class ServiceUnavailable(ServiceError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


def empty_response(status_code: int, headers: Optional[Dict[str, str]] = None) -> Response:
    return Response(status_code=status_code, headers=headers)


async def _service_error_handler(request: Request, exc: ServiceError) -> Response:
    if exc.reason:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.reason}")
    return empty_response(exc.status_code, exc.headers)


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> Response:
    return empty_response(exc.status_code, getattr(exc, "headers", None))


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> Response:
    logger.info(f"{request.method} {request.url.path} -> 400: {exc.errors()}")
    return empty_response(status.HTTP_400_BAD_REQUEST)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, _service_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
