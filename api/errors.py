"""Global exception handlers for FastAPI."""

import logging

import psycopg2
import redis
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from starlette.responses import JSONResponse

from api.base import error_response, ErrorCodes
from core.editor import LastLineItemError

logger = logging.getLogger(__name__)


def _error(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=error_response(code, message).model_dump(mode="json"),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the app."""

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        message = str(exc)
        if isinstance(exc, LastLineItemError):
            return _error(400, ErrorCodes.LAST_LINE_ITEM, message)
        if "not found" in message.lower():
            return _error(404, ErrorCodes.NOT_FOUND, message)
        return _error(400, ErrorCodes.INVALID_REQUEST, message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request: Request, exc: RequestValidationError):
        return _error(422, ErrorCodes.VALIDATION_ERROR, str(exc.errors()))

    @app.exception_handler(ValidationError)
    async def model_validation_error_handler(request: Request, exc: ValidationError):
        return _error(422, ErrorCodes.VALIDATION_ERROR, str(exc.errors(include_url=False)))

    @app.exception_handler(psycopg2.Error)
    async def database_error_handler(request: Request, exc: psycopg2.Error):
        logger.error(f"Database unavailable: {exc}")
        return _error(503, ErrorCodes.SERVICE_UNAVAILABLE, f"Invoice storage unavailable: {exc}")

    @app.exception_handler(redis.RedisError)
    async def valkey_error_handler(request: Request, exc: redis.RedisError):
        logger.error(f"Valkey unavailable: {exc}")
        return _error(503, ErrorCodes.SERVICE_UNAVAILABLE, f"Session store unavailable: {exc}")

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception")
        return _error(500, ErrorCodes.INTERNAL_ERROR, "An internal error occurred")
