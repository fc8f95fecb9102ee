"""Request context middleware for observability."""

import uuid
from collections.abc import Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from accountdir.observability.logging import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind request_id, method and path to structlog contextvars.

    A caller-supplied X-Request-ID is reused; otherwise one is generated.
    The id is echoed on the response.
    """

    async def dispatch(  # type: ignore[override]
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        """Process request and bind context."""
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        logger.debug("request_started")
        try:
            response = await call_next(request)  # type: ignore[misc]
            logger.debug("request_completed", status_code=response.status_code)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response  # type: ignore[no-any-return]
        finally:
            structlog.contextvars.clear_contextvars()
