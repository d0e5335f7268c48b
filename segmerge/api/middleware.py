"""HTTP middleware: request logging, payload limit and request timeout."""

import asyncio
import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from segmerge.api.errors import ErrorCode, error_response

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs one line per request and stamps the API version header."""

    def __init__(self, app: ASGIApp, version: str) -> None:
        super().__init__(app)
        self._version = version

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        response.headers["X-API-Version"] = self._version
        response.headers["X-Content-Type-Options"] = "nosniff"
        logger.info(
            "%s %s %d %.0fms",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )
        return response


class PayloadLimitMiddleware(BaseHTTPMiddleware):
    """Rejects requests whose declared Content-Length exceeds ``max_bytes``."""

    def __init__(self, app: ASGIApp, max_bytes: int) -> None:
        super().__init__(app)
        self._max_bytes = max_bytes

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        content_length = request.headers.get("content-length")
        if (
            content_length
            and content_length.isdigit()
            and int(content_length) > self._max_bytes
        ):
            logger.warning(
                "Rejected %s %s: %s bytes exceeds limit",
                request.method,
                request.url.path,
                content_length,
            )
            return error_response(
                413,
                ErrorCode.PAYLOAD_TOO_LARGE,
                f"Request exceeds maximum size of {self._max_bytes / (1024 * 1024):g}MB",
            )
        return await call_next(request)


class TimeoutMiddleware(BaseHTTPMiddleware):
    """Abandons requests that take longer than ``timeout_seconds``."""

    def __init__(self, app: ASGIApp, timeout_seconds: float) -> None:
        super().__init__(app)
        self._timeout = timeout_seconds

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            return await asyncio.wait_for(call_next(request), timeout=self._timeout)
        except asyncio.TimeoutError:
            logger.error(
                "Request %s %s exceeded %.1fs",
                request.method,
                request.url.path,
                self._timeout,
            )
            return error_response(
                500,
                ErrorCode.PROCESS_TIMEOUT,
                f"Request processing exceeded timeout of {self._timeout * 1000:.0f}ms",
            )
