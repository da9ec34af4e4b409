"""
Exception handling for the Pixel Transform API.

Maps domain exceptions to HTTP responses and provides the safe_endpoint
decorator used by routers.
"""

import functools
import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from core.constants import APIConstants
from core.exceptions import (
    CancelledError,
    EncodeUnavailable,
    LoadError,
    SurfaceUnavailable,
    TransformError,
)

logger = logging.getLogger(__name__)

STATUS_CODES = {
    LoadError: 400,
    EncodeUnavailable: 415,
    SurfaceUnavailable: 503,
    CancelledError: APIConstants.CLIENT_CLOSED_REQUEST,
}


def status_for(exc: TransformError) -> int:
    """HTTP status code for a transform error."""
    for exc_type, status_code in STATUS_CODES.items():
        if isinstance(exc, exc_type):
            return status_code
    return 500


async def transform_error_handler(request: Request, exc: TransformError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    else:
        logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc.message}")

    content = {"error": type(exc).__name__, "detail": exc.message}
    if exc.detail:
        content["context"] = exc.detail
    return JSONResponse(status_code=status_code, content=content)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    logger.warning(f"Invalid directives on {request.url.path}: {exc.error_count()} error(s)")
    return JSONResponse(
        status_code=422,
        content=jsonable_encoder({"error": "ValidationError", "detail": exc.errors(include_url=False)}),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register domain exception handlers on the app."""
    app.add_exception_handler(TransformError, transform_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)


def safe_endpoint(func):
    """
    Wrap a router coroutine so unexpected errors become 500 responses.

    HTTPException, TransformError and ValidationError pass through to their
    registered handlers.
    """

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except (HTTPException, TransformError, ValidationError):
            raise
        except Exception as e:
            logger.error(f"Unhandled error in {func.__name__}: {e}", exc_info=True)
            raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")

    return wrapper
