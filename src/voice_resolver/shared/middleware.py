"""
Correlation ID and access logging middleware.
"""

import time
import uuid
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from voice_resolver.shared.logging import correlation_id_var, get_logger

logger = get_logger(__name__)

# Header names for correlation ID propagation
CORRELATION_ID_HEADER = "X-Correlation-ID"
REQUEST_ID_HEADER = "X-Request-ID"


def generate_correlation_id() -> str:
    """Generate a new correlation ID."""
    return str(uuid.uuid4())


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Binds a correlation ID to every request and writes one access log line.

    The ID is taken from X-Correlation-ID, then X-Request-ID, else generated,
    and echoed back on the response.
    """

    def __init__(self, app: Any, exclude_paths: list[str] | None = None) -> None:
        super().__init__(app)
        self.exclude_paths = exclude_paths or ["/health"]

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        correlation_id = (
            request.headers.get(CORRELATION_ID_HEADER)
            or request.headers.get(REQUEST_ID_HEADER)
            or generate_correlation_id()
        )
        token = correlation_id_var.set(correlation_id)

        method = request.method
        path = request.url.path
        start_time = time.perf_counter()
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[CORRELATION_ID_HEADER] = correlation_id
            return response
        finally:
            if path not in self.exclude_paths:
                logger.info(
                    f"{method} {path} {status_code}",
                    extra={
                        "method": method,
                        "path": path,
                        "status_code": status_code,
                        "duration_ms": round((time.perf_counter() - start_time) * 1000, 2),
                        "client": request.client.host if request.client else None,
                    },
                )
            correlation_id_var.reset(token)
