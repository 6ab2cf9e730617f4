"""
Request Log Middleware for FastAPI.

This middleware times every API request, reports it to Logfire and stores a
``RequestLog`` row that feeds the admin log and error viewers.
"""

import time
from typing import Callable, Optional

import jwt
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from medops.core.database import session as db_session
from medops.core.database.entities.request_logs import RequestLog
from medops.core.logging_config import get_logger
from medops.core.monitoring import log_api_request
from medops.server.core.config import settings
from medops.server.core.security import decode_access_token

logger = get_logger(__name__)

SLOW_REQUEST_MS = 1000


def _user_id_from(request: Request) -> Optional[str]:
    header = request.headers.get("authorization", "")
    if not header.lower().startswith("bearer "):
        return None
    try:
        return decode_access_token(header[7:].strip()).get("sub")
    except jwt.PyJWTError:
        return None


class RequestLogMiddleware(BaseHTTPMiddleware):
    """Middleware for timing, tracing and persisting API requests."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Process the request and log metrics.

        Args:
            request: The incoming HTTP request
            call_next: The next middleware/handler

        Returns:
            The HTTP response
        """
        start_time = time.time()
        method = request.method
        path = request.url.path

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"API request failed: {method} {path}",
                exc_info=True,
                extra={"method": method, "path": path, "duration_ms": duration_ms, "error": str(e)},
            )
            log_api_request(method=method, path=path, status_code=500, duration_ms=duration_ms)
            await self._persist(request, 500, duration_ms, error=str(e))
            raise

        duration_ms = (time.time() - start_time) * 1000
        log_api_request(method=method, path=path, status_code=response.status_code, duration_ms=duration_ms)
        response.headers["X-Process-Time"] = str(duration_ms)

        if duration_ms > SLOW_REQUEST_MS:
            logger.warning(
                f"Slow API request: {method} {path} took {duration_ms:.2f}ms",
                extra={
                    "method": method,
                    "path": path,
                    "duration_ms": duration_ms,
                    "status_code": response.status_code,
                },
            )

        await self._persist(request, response.status_code, duration_ms)
        return response

    async def _persist(
        self, request: Request, status_code: int, duration_ms: float, error: Optional[str] = None
    ) -> None:
        """Store the request for the admin viewers. Failures are logged, never raised."""
        if not settings.persist_request_logs or not request.url.path.startswith("/api/"):
            return
        entry = RequestLog(
            method=request.method,
            path=request.url.path[:512],
            status_code=status_code,
            duration_ms=round(duration_ms, 2),
            user_id=_user_id_from(request),
            ip_address=request.client.host if request.client else None,
            user_agent=(request.headers.get("user-agent") or "")[:512] or None,
            error=error[:1024] if error else None,
        )
        try:
            async with db_session.async_session_maker() as session:
                session.add(entry)
                await session.commit()
        except Exception as e:
            logger.warning(f"Could not persist request log for {request.method} {request.url.path}: {e}")
