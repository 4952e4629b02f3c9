"""
Request logging middleware.

Emits one structured log record per HTTP request (method, path, status,
duration) so access patterns and failures show up in the application logs
alongside everything else.
"""

import logging
import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware that logs every request once it has been handled.

    The log level follows the status class: 5xx at ERROR, 4xx at WARNING,
    everything else at INFO. Request bodies are never logged, so passwords
    and tokens posted by clients stay out of the logs.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start_time = time.perf_counter()
        status_code = 500
        error = None

        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        except Exception as e:
            error = str(e)
            raise
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000
            self._log_request(
                method=request.method,
                path=self._loggable_path(request.url.path),
                status_code=status_code,
                duration_ms=duration_ms,
                error=error,
            )

    @staticmethod
    def _loggable_path(path: str) -> str:
        """Mask activation tokens embedded in the URL."""
        marker = "/users/token/"
        if marker in path:
            return path.split(marker)[0] + marker + "***"
        return path

    @staticmethod
    def _log_request(
        method: str,
        path: str,
        status_code: int,
        duration_ms: float,
        error: str | None = None,
    ) -> None:
        log_data = {
            "type": "request",
            "method": method,
            "path": path,
            "status_code": status_code,
            "duration_ms": round(duration_ms, 2),
        }

        if error:
            log_data["error"] = error

        summary = f"{method} {path} -> {status_code} ({log_data['duration_ms']}ms)"
        if status_code >= 500:
            logger.error(summary, extra=log_data)
        elif status_code >= 400:
            logger.warning(summary, extra=log_data)
        else:
            logger.info(summary, extra=log_data)
