"""
API Middleware

- Request logging with a request id bound into every log line
- Per-client rate limiting
- Security and cache headers
"""

import asyncio
import time
import uuid
from collections import defaultdict, deque
from typing import Callable, Collection, Deque, Dict, Iterable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
import structlog

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def client_address(request: Request, trusted_proxies: Collection[str] = ()) -> str:
    """
    Client address of the request.

    X-Forwarded-For is honoured only when the peer itself is a trusted proxy,
    in which case its first hop is the client.
    """
    peer = request.client.host if request.client else "unknown"
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded and peer in trusted_proxies:
        return forwarded.split(",")[0].strip() or peer
    return peer


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each request once it completes, with status, timing and request id"""

    def __init__(self, app, slow_request_ms: float = 1000.0):
        super().__init__(app)
        self.slow_request_ms = slow_request_ms

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        structlog.contextvars.bind_contextvars(request_id=request_id)
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
            duration_ms = round((time.perf_counter() - start_time) * 1000, 2)

            log = logger.info
            if response.status_code >= 500:
                log = logger.error
            elif response.status_code >= 400 or duration_ms >= self.slow_request_ms:
                log = logger.warning

            log(
                "Request completed",
                method=request.method,
                path=request.url.path,
                query=str(request.query_params) or None,
                status_code=response.status_code,
                duration_ms=duration_ms,
                slow=duration_ms >= self.slow_request_ms,
                client=client_address(request),
            )
        finally:
            structlog.contextvars.unbind_contextvars("request_id")

        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Sliding-window in-memory rate limiter, per client address.

    Limits are per process; with several workers each keeps its own window.
    Liveness and readiness probes are never limited.
    """

    def __init__(
        self,
        app,
        max_requests: int = 100,
        window_seconds: int = 60,
        exempt_paths: Iterable[str] = ("/api/health/live", "/api/health/ready"),
        trusted_proxies: Iterable[str] = (),
    ):
        super().__init__(app)
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.exempt_paths = frozenset(exempt_paths)
        self.trusted_proxies = frozenset(trusted_proxies)
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)
        self._last_sweep = time.monotonic()
        self._lock = asyncio.Lock()

    def _prune(self, client: str, now: float) -> None:
        hits = self._hits.get(client)
        if hits is None:
            return
        while hits and now - hits[0] >= self.window_seconds:
            hits.popleft()
        if not hits:
            del self._hits[client]

    def _sweep(self, now: float) -> None:
        """Forget clients idle for a whole window; runs at most once per window."""
        if now - self._last_sweep < self.window_seconds:
            return
        for client in list(self._hits):
            self._prune(client, now)
        self._last_sweep = now

    def _limited(self, request: Request) -> JSONResponse:
        return JSONResponse(
            status_code=429,
            content={
                "success": False,
                "message": "Too many requests, please try again later.",
                "error": {"code": "RATE_LIMITED", "details": {"retryAfterSeconds": self.window_seconds}},
                "path": request.url.path,
            },
            headers={
                "Retry-After": str(self.window_seconds),
                "X-RateLimit-Limit": str(self.max_requests),
                "X-RateLimit-Remaining": "0",
            },
        )

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in self.exempt_paths:
            return await call_next(request)

        client = client_address(request, self.trusted_proxies)
        now = time.monotonic()

        async with self._lock:
            self._sweep(now)
            self._prune(client, now)
            hits = self._hits[client]

            if len(hits) >= self.max_requests:
                logger.warning("Rate limit exceeded", client=client, path=request.url.path)
                return self._limited(request)

            hits.append(now)
            remaining = self.max_requests - len(hits)

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self.max_requests)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Security headers on every response; analytics payloads are never cached"""

    def __init__(self, app, hsts: bool = True):
        super().__init__(app)
        self.hsts = hsts

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if self.hsts:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        if request.url.path.startswith("/api/analytics"):
            response.headers["Cache-Control"] = "no-store"

        return response
