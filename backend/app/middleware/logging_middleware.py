"""
ASGI middleware that logs every API request.

Implemented as a pure ASGI callable rather than ``BaseHTTPMiddleware`` so it
never buffers the response. For each request it logs method, path, query,
status code and duration; headers are passed through the sensitive-data
filter so bearer tokens never reach the log files.
"""

import logging
import time
from typing import Optional
from urllib.parse import parse_qsl

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ..core.logging_config import filter_sensitive_data

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware:
    """Log one line per HTTP request with its outcome."""

    def __init__(self, app: ASGIApp, exclude_paths: Optional[list] = None):
        """
        Args:
            app: The wrapped ASGI application
            exclude_paths: Paths that are not logged (probes, root)
        """
        self.app = app
        self.exclude_paths = exclude_paths or ["/health", "/"]

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope.get("path", "") in self.exclude_paths:
            await self.app(scope, receive, send)
            return

        start_time = time.perf_counter()
        method = scope.get("method", "UNKNOWN")
        path = scope.get("path", "")
        query_string = scope.get("query_string", b"").decode("utf-8", errors="ignore")
        headers = {
            k.decode("latin-1"): v.decode("latin-1")
            for k, v in scope.get("headers", [])
        }
        client = scope.get("client")
        context = {
            "request_id": id(scope),
            "method": method,
            "path": path,
            "query_params": dict(parse_qsl(query_string)) or None,
            "client": client[0] if client else None,
            "headers": filter_sensitive_data(headers),
        }

        status_code = 0

        async def logging_send(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message.get("status", 0)
            await send(message)

        logger.debug(f"Request started: {method} {path}", extra={"extra_fields": context})

        try:
            await self.app(scope, receive, logging_send)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"Request failed: {method} {path} - {e}",
                exc_info=True,
                extra={"extra_fields": {**context, "duration_ms": duration_ms, "error": str(e)}}
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        if status_code < 400:
            log_level = logging.INFO
        elif status_code < 500:
            log_level = logging.WARNING
        else:
            log_level = logging.ERROR

        logger.log(
            log_level,
            f"Request completed: {method} {path} - {status_code} ({duration_ms:.2f}ms)",
            extra={"extra_fields": {**context, "status_code": status_code, "duration_ms": duration_ms}}
        )
