"""
Domain exceptions and their HTTP translation.

Services raise the exceptions defined here; ``register_error_handlers``
maps them onto status codes so that every failure reaches the client
as a ``{"message": ...}`` body.  Anything unclassified is logged and
returned as a 500 carrying the raw error message.
"""

import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


logger = logging.getLogger(__name__)


class BookingPlatformError(Exception):
    """Base class for errors raised by the service layer."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(BookingPlatformError):
    status_code = status.HTTP_404_NOT_FOUND


class BadRequestError(BookingPlatformError):
    status_code = status.HTTP_400_BAD_REQUEST


class ForbiddenError(BookingPlatformError):
    status_code = status.HTTP_403_FORBIDDEN


class AuthenticationError(BookingPlatformError):
    status_code = status.HTTP_401_UNAUTHORIZED


class ConflictError(BookingPlatformError):
    status_code = status.HTTP_409_CONFLICT


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on ``app``."""

    @app.exception_handler(BookingPlatformError)
    async def platform_error_handler(request: Request, exc: BookingPlatformError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"message": "Invalid request", "errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": str(exc)},
        )
