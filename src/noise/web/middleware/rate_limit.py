"""Fixed-window rate limiting for the API."""

import logging
import math
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of counting one request against a limiter."""

    allowed: bool
    limit: int
    remaining: int
    reset_seconds: int


class FixedWindowRateLimiter:
    """Counts requests per key in fixed windows of ``window_seconds``."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        self._windows: dict[str, tuple[float, int]] = {}
        self._lock = threading.Lock()

    def hit(self, key: str) -> RateLimitResult:
        """Count a request for ``key`` and report whether it is within the limit."""
        now = self.clock()
        with self._lock:
            window_start, count = self._windows.get(key, (now, 0))
            if now - window_start >= self.window_seconds:
                window_start, count = now, 0
            count += 1
            self._windows[key] = (window_start, count)
            if len(self._windows) > 10_000:
                self._prune(now)

        reset = max(0, math.ceil(window_start + self.window_seconds - now))
        return RateLimitResult(
            allowed=count <= self.max_requests,
            limit=self.max_requests,
            remaining=max(0, self.max_requests - count),
            reset_seconds=reset,
        )

    def reset(self) -> None:
        """Forget every window."""
        with self._lock:
            self._windows.clear()

    def _prune(self, now: float) -> None:
        expired = [k for k, (start, _) in self._windows.items() if now - start >= self.window_seconds]
        for key in expired:
            del self._windows[key]


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Apply the general limit to ``/api/`` and the stricter upload limit to audio items."""

    def __init__(
        self,
        app: Callable,
        api_limiter: FixedWindowRateLimiter,
        upload_limiter: FixedWindowRateLimiter,
        api_prefix: str = "/api/",
        upload_prefix: str = "/api/audio-items",
    ) -> None:
        super().__init__(app)
        self.api_limiter = api_limiter
        self.upload_limiter = upload_limiter
        self.api_prefix = api_prefix
        self.upload_prefix = upload_prefix

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Reject requests over the limit with 429."""
        path = request.url.path
        if not path.startswith(self.api_prefix) or request.method == "OPTIONS":
            return await call_next(request)

        client_key = request.client.host if request.client else "unknown"

        result = self.api_limiter.hit(client_key)
        if not result.allowed:
            return self._reject(
                result, "Too Many Requests", "Please try again later", client_key, path
            )

        if path.startswith(self.upload_prefix):
            upload_result = self.upload_limiter.hit(client_key)
            if not upload_result.allowed:
                return self._reject(
                    upload_result,
                    "Too Many Uploads",
                    "Please wait before uploading more files",
                    client_key,
                    path,
                )
            result = upload_result

        response = await call_next(request)
        response.headers.update(self._headers(result))
        return response

    def _reject(
        self, result: RateLimitResult, error: str, message: str, client_key: str, path: str
    ) -> JSONResponse:
        logger.warning("Rate limit exceeded", extra={"client_host": client_key, "path": path})
        return JSONResponse(
            status_code=429,
            content={"error": error, "message": message},
            headers={**self._headers(result), "Retry-After": str(result.reset_seconds)},
        )

    @staticmethod
    def _headers(result: RateLimitResult) -> dict[str, str]:
        return {
            "RateLimit-Limit": str(result.limit),
            "RateLimit-Remaining": str(result.remaining),
            "RateLimit-Reset": str(result.reset_seconds),
        }
