"""
Domain Exception Handler.

Turns ``MedOpsError`` raised by the service layer into JSON responses with the
status code the error carries.
"""

from fastapi import Request
from fastapi.responses import JSONResponse

from medops.core.errors import MedOpsError
from medops.core.logging_config import get_logger

logger = get_logger(__name__)


async def domain_exception_handler(request: Request, exc: MedOpsError) -> JSONResponse:
    """
    Convert a domain error into an API error response.

    Args:
        request: The HTTP request that caused the exception
        exc: The domain error that was raised

    Returns:
        JSONResponse with ``detail`` and ``error_type``
    """
    logger.info(
        f"{type(exc).__name__} in {request.method} {request.url.path}: {exc.detail}",
        extra={"status_code": exc.status_code, "error_type": type(exc).__name__},
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error_type": type(exc).__name__},
    )
