"""In-memory sliding-window rate limiter.

Per client IP, at most ``rate_limit_per_minute`` requests in any rolling
60-second window.  State lives in this process only, so limits are
per-instance.  ``/health`` is never limited.
"""

from __future__ import annotations

import time
from collections import defaultdict, deque
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from cyclebloom.config import Settings, get_settings

EXEMPT_PATHS: set[str] = {"/health"}


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Per-IP sliding window rate limiter."""

    def __init__(
        self,
        app: Any,
        settings: Settings | None = None,
        window_seconds: float = 60.0,
    ) -> None:
        super().__init__(app)
        s = settings or get_settings()
        self._max_requests = s.rate_limit_per_minute
        self._window_seconds = window_seconds
        # ip -> request timestamps, oldest first
        self._requests: dict[str, deque[float]] = defaultdict(deque)

    def _client_ip(self, request: Request) -> str:
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            return forwarded.split(",")[0].strip()
        return request.client.host if request.client else "unknown"

    def _expire(self, ip: str, now: float) -> deque[float]:
        stamps = self._requests[ip]
        cutoff = now - self._window_seconds
        while stamps and stamps[0] <= cutoff:
            stamps.popleft()
        return stamps

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in EXEMPT_PATHS:
            return await call_next(request)

        ip = self._client_ip(request)
        now = time.monotonic()
        stamps = self._expire(ip, now)

        if len(stamps) >= self._max_requests:
            retry_after = int(self._window_seconds - (now - stamps[0]))
            return Response(
                content='{"detail":"Rate limit exceeded"}',
                status_code=429,
                media_type="application/json",
                headers={"Retry-After": str(max(retry_after, 1))},
            )

        stamps.append(now)
        response = await call_next(request)

        remaining = self._max_requests - len(stamps)
        response.headers["X-RateLimit-Limit"] = str(self._max_requests)
        response.headers["X-RateLimit-Remaining"] = str(max(remaining, 0))
        return response
