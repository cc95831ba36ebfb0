"""Request logging middleware."""

import logging
import time
from typing import Callable
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request with its status and duration, and tags the response with a request ID."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Reuse the caller's request ID when one is supplied
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id

        start_time = time.perf_counter()
        logger.debug(f"[{request_id}] {request.method} {request.url.path} started")

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
            logger.error(
                f"[{request_id}] {request.method} {request.url.path} failed "
                f"after {duration_ms}ms: {e}"
            )
            raise

        duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
        logger.info(
            f"[{request_id}] {request.method} {request.url.path} "
            f"-> {response.status_code} ({duration_ms}ms)"
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
