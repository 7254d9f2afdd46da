"""HTTP exception handlers.

Domain exceptions are translated into a uniform JSON error body. Each module
customises the response through the http_status_code and error_code class
attributes of its exceptions, so this layer never needs to know about them.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse
from loguru import logger

from aiocatalogs.core.domain.exceptions import DomainException


async def domain_exception_handler(
    _request: Request, exc: DomainException
) -> JSONResponse:
    """Handle domain exceptions."""
    status_code = getattr(exc, "http_status_code", 400)
    error_code = getattr(exc, "error_code", "DOMAIN_ERROR")

    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": error_code,
                "message": exc.message,
            }
        },
    )


async def global_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Handle all unhandled exceptions."""
    logger.exception(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An internal error occurred",
            }
        },
    )
