"""Middleware for HTTP error logging."""

import logging
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from snapvault.core.logging import object_key_context

logger = logging.getLogger(__name__)


class HTTPErrorLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to ensure all HTTP errors are logged.

    - 4xx responses: logged at WARN level
    - 5xx responses: logged at ERROR level
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        object_key_context.set(None)

        file_name = None
        # Multipart bodies can be large; only JSON bodies are inspected
        if request.method == "POST" and request.headers.get("content-type", "").startswith("application/json"):
            try:
                body = await request.json()
                if isinstance(body, dict):
                    file_name = body.get("fileName")
                    if body.get("key"):
                        object_key_context.set(body["key"])
            except ValueError:
                pass

        response = await call_next(request)

        duration_ms = (time.time() - start_time) * 1000
        extra = {
            "http_status": response.status_code,
            "method": request.method,
            "path": request.url.path,
            "file_name": file_name,
            "duration_ms": duration_ms,
        }

        if 400 <= response.status_code < 500:
            logger.warning("Client error response", extra=extra)
        elif response.status_code >= 500:
            logger.error("Server error response", extra=extra)

        return response
