"""
API exception mapping.

Domain errors from the core and raster layers are translated into HTTP
responses in one place:
- BufferNotFoundError -> 404
- other RasterError / ValueError -> 400
- anything else -> 500 (logged with traceback)
"""

import functools
import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from core.exceptions import BufferNotFoundError, RasterError

logger = logging.getLogger(__name__)


def to_http_exception(exc: Exception) -> HTTPException:
    """Map a domain exception to an HTTPException."""
    if isinstance(exc, HTTPException):
        return exc
    if isinstance(exc, BufferNotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, (RasterError, ValueError)):
        return HTTPException(status_code=400, detail=str(exc))
    return HTTPException(status_code=500, detail=f"Internal server error: {exc}")


def safe_endpoint(func):
    """
    Decorator for async endpoints converting domain errors to HTTP errors.

    HTTPExceptions pass through unchanged; unexpected exceptions are logged
    with a traceback before being reported as 500.
    """

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except HTTPException:
            raise
        except (RasterError, ValueError) as e:
            logger.warning(f"{func.__name__} rejected request: {e}")
            raise to_http_exception(e) from e
        except Exception as e:
            logger.error(f"{func.__name__} failed: {e}", exc_info=True)
            raise to_http_exception(e) from e

    return wrapper


def register_exception_handlers(app: FastAPI) -> None:
    """Install handlers for domain errors raised outside safe_endpoint."""

    @app.exception_handler(BufferNotFoundError)
    async def buffer_not_found_handler(request: Request, exc: BufferNotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(RasterError)
    async def raster_error_handler(request: Request, exc: RasterError):
        logger.warning(f"{request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Global exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500, content={"detail": f"Internal server error: {str(exc)}"}
        )
