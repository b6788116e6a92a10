"""
Request logging middleware.

Opens a logging context per HTTP request: a short request id (echoed back
as X-Request-Id) and the chat session id the widget sends in X-Session-Id.
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ..logging_config import clear_context, log_action, request_id_var, session_id_var

logger = logging.getLogger(__name__)

SESSION_HEADER = "X-Session-Id"
REQUEST_ID_HEADER = "X-Request-Id"
UNLOGGED_PATHS = {"/health", "/favicon.ico"}


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Binds request/session ids to the logging context and logs each request's outcome"""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = uuid.uuid4().hex[:8]
        request_id_var.set(request_id)
        session_id_var.set(request.headers.get(SESSION_HEADER) or None)

        path = request.url.path
        quiet = path in UNLOGGED_PATHS
        started = time.perf_counter()

        if not quiet:
            log_action(logger, "info", "request_start", "Request started",
                       method=request.method, path=path)

        try:
            response = await call_next(request)
        except Exception as e:
            log_action(logger, "error", "request_error", f"Request failed: {e}",
                       method=request.method, path=path, error=str(e),
                       duration_ms=_elapsed_ms(started))
            raise
        finally:
            clear_context()

        if not quiet:
            # context is already cleared, so the id is passed explicitly
            log_action(logger, "info", "request_end", "Request completed",
                       method=request.method, path=path, request_id=request_id,
                       status_code=response.status_code, duration_ms=_elapsed_ms(started))

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
