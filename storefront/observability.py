from __future__ import annotations
import time, uuid
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
import logging

logger = logging.getLogger("storefront")

class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable):
        start = time.perf_counter()
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        trace_id = request.headers.get("x-trace-id") or str(uuid.uuid4())

        request.state.request_id = request_id
        request.state.trace_id = trace_id

        logger.info(
            "request.start",
            extra={"request_id": request_id, "trace_id": trace_id, "path": request.url.path, "method": request.method}
        )
        try:
            response: Response = await call_next(request)
        except Exception:
            duration_ms = int((time.perf_counter() - start) * 1000)
            logger.exception(
                "request.exception",
                extra={"request_id": request_id, "trace_id": trace_id, "duration_ms": duration_ms}
            )
            raise
        duration_ms = int((time.perf_counter() - start) * 1000)
        response.headers["x-request-id"] = request_id
        response.headers["x-trace-id"] = trace_id
        logger.info(
            "request.end",
            extra={
                "request_id": request_id,
                "trace_id": trace_id,
                "status": response.status_code,
                "duration_ms": duration_ms,
                # set by require_authenticated; never the token itself
                "user_id": getattr(request.state, "user_id", None),
            }
        )
        return response

HSTS_VALUE = "max-age=31536000; includeSubDomains; preload"

class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, hsts: bool = False):
        super().__init__(app)
        self.hsts = hsts

    async def dispatch(self, request: Request, call_next: Callable):
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "SAMEORIGIN"
        response.headers["Referrer-Policy"] = "no-referrer"
        if self.hsts:
            response.headers["Strict-Transport-Security"] = HSTS_VALUE
        return response
