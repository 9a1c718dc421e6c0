"""Domain error taxonomy and the FastAPI handlers that render it.

Services raise these; routes let them propagate. Every error reaches the
client as ``{"message": ...}`` with the status code of its class.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class DomainError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DomainError):
    status_code = 400
    default_message = "Invalid request"


class NotFoundError(DomainError):
    status_code = 404
    default_message = "Resource not found"


class OwnershipError(DomainError):
    status_code = 403
    default_message = "Resource belongs to another user"


class ConflictError(DomainError):
    status_code = 409
    default_message = "Conflicting request"


class InsufficientFundsError(DomainError):
    status_code = 400
    default_message = "Insufficient funds"


class ExternalServiceError(DomainError):
    status_code = 502
    default_message = "External service failed"

    def __init__(self, message: str | None = None, timeout: bool = False):
        super().__init__(message)
        if timeout:
            self.status_code = 504


class InternalError(DomainError):
    status_code = 500


async def domain_error_handler(request: Request, exc: DomainError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg")
    else:
        message = ValidationError.default_message
    logger.warning(f"{request.method} {request.url.path} rejected (400): {message}")
    return JSONResponse(status_code=400, content={"message": message})


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unexpected error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


__all__ = [
    "DomainError",
    "ValidationError",
    "NotFoundError",
    "OwnershipError",
    "ConflictError",
    "InsufficientFundsError",
    "ExternalServiceError",
    "InternalError",
    "register_exception_handlers",
]
