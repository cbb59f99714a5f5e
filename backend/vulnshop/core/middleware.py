"""Request-scoped middleware for VulnShop."""
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from .logging import get_logger, request_id_ctx

logger = get_logger("vulnshop.middleware")


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Assign a unique request ID, propagate it via ContextVar, and log request metrics."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        token = request_id_ctx.set(request_id)

        start = time.perf_counter()
        try:
            response: Response = await call_next(request)
        finally:
            duration_ms = (time.perf_counter() - start) * 1000
            request_id_ctx.reset(token)

        response.headers["X-Request-ID"] = request_id

        logger.log_api_request(
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=duration_ms,
            client_ip=request.client.host if request.client else "unknown",
        )

        return response


class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Reject requests carrying a wrong X-API-Key header.

    VULNERABILITY: Requests without the header are let through, and the key
    is compared against a hardcoded value.
    """

    def __init__(self, app, api_key: str):
        super().__init__(app)
        self.api_key = api_key

    async def dispatch(self, request: Request, call_next) -> Response:
        provided = request.headers.get("X-API-Key")
        if provided and provided != self.api_key:
            return JSONResponse(status_code=401, content={"error": "Invalid API key"})
        return await call_next(request)
