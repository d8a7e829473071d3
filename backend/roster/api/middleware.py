"""Request Middleware - per-request logging and a hard time budget.

Invariants:
    - Every request logs method, path, status_code and duration_ms once it completes
    - A request running longer than timeout_seconds is cancelled and answered
      with the 504 REQUEST_TIMEOUT envelope
    - Exceptions from the app are logged and re-raised (the catch-all handler
      renders them), never swallowed here
"""

import asyncio
import logging
import time

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from roster.core.errors import RequestTimeoutError

logger = logging.getLogger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Log each request and enforce the request timeout."""

    def __init__(self, app, timeout_seconds: float = 10.0):
        super().__init__(app)
        self.timeout_seconds = timeout_seconds

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        extra = {"method": request.method, "path": request.url.path}
        try:
            response = await asyncio.wait_for(
                call_next(request), timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            exc = RequestTimeoutError(self.timeout_seconds)
            logger.error(
                exc.message,
                extra={**extra, "error_code": exc.code, "status_code": exc.http_status},
            )
            return JSONResponse(
                status_code=exc.http_status, content=exc.to_response(),
            )
        except Exception:
            logger.error(
                "Request failed",
                extra={**extra, "duration_ms": _elapsed_ms(start)},
            )
            raise

        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code}",
            extra={
                **extra,
                "status_code": response.status_code,
                "duration_ms": _elapsed_ms(start),
            },
        )
        return response


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)
