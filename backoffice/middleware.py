"""
Name: HTTP Middleware

Responsibilities:
  - Generate or propagate request_id (X-Request-Id)
  - Set request context for logging
  - Log completion with status and latency

Collaborators:
  - context.py: ContextVars for request-scoped data
  - logger.py: Structured logging

Constraints:
  - Must be the outermost application middleware
  - Must clear context after response
"""

import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from .context import (
    clear_context,
    http_method_var,
    http_path_var,
    request_id_var,
)
from .logger import logger

REQUEST_ID_HEADER = "X-Request-Id"


def _incoming_request_id(request: Request) -> str | None:
    # R: Accept a caller-supplied id only when it parses as a UUID
    raw = request.headers.get(REQUEST_ID_HEADER)
    if not raw:
        return None
    try:
        return str(uuid.UUID(raw))
    except ValueError:
        return None


class RequestContextMiddleware(BaseHTTPMiddleware):
    """R: Establish request context and log request completion."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = _incoming_request_id(request) or str(uuid.uuid4())

        request_id_var.set(request_id)
        http_method_var.set(request.method)
        http_path_var.set(request.url.path)
        request.state.request_id = request_id

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            logger.info(
                "request completed",
                extra={
                    "status_code": response.status_code,
                    "latency_ms": round((time.perf_counter() - start_time) * 1000, 2),
                },
            )
            return response
        except Exception as exc:
            logger.exception(
                "request failed",
                extra={
                    "latency_ms": round((time.perf_counter() - start_time) * 1000, 2),
                    "error": str(exc),
                },
            )
            raise
        finally:
            clear_context()
