"""HTTP middleware: per-IP rate limiting, body size limit and request logging."""

import logging
import math
import threading
import time
from collections import OrderedDict
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

RATE_LIMITED_PREFIX = "/api/"
# Hard cap on tracked clients; the oldest window is evicted when full.
MAX_TRACKED_CLIENTS = 10_000

CallNext = Callable[[Request], Awaitable[Response]]


@dataclass
class RateLimitResult:
    allowed: bool
    limit: int
    remaining: int
    reset_after: int


class FixedWindowRateLimiter:
    """
    Counts requests per key in fixed windows of window_seconds.

    Windows are kept ordered by start time, so expired entries sit at the
    front and are dropped cheaply; at most max_clients keys are tracked.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: int,
        clock: Callable[[], float] = time.monotonic,
        max_clients: int = MAX_TRACKED_CLIENTS,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.max_clients = max_clients
        self._clock = clock
        self._lock = threading.Lock()
        self._windows: OrderedDict[str, tuple[float, int]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._windows)

    def _sweep(self, now: float) -> None:
        while self._windows:
            key, (start, _) = next(iter(self._windows.items()))
            if now - start < self.window_seconds:
                break
            del self._windows[key]

    def hit(self, key: str) -> RateLimitResult:
        now = self._clock()
        with self._lock:
            self._sweep(now)
            start, count = self._windows.get(key, (now, 0))
            if now - start >= self.window_seconds:
                start, count = now, 0
            if count == 0:
                self._windows.pop(key, None)
                while len(self._windows) >= self.max_clients:
                    self._windows.popitem(last=False)
            count += 1
            self._windows[key] = (start, count)
        reset_after = max(0, math.ceil(start + self.window_seconds - now))
        return RateLimitResult(
            allowed=count <= self.max_requests,
            limit=self.max_requests,
            remaining=max(0, self.max_requests - count),
            reset_after=reset_after,
        )


def client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def rate_limit_middleware(limiter: FixedWindowRateLimiter) -> Callable[[Request, CallNext], Awaitable[Response]]:
    """Build an http middleware that enforces limiter on /api/ routes."""

    async def middleware(request: Request, call_next: CallNext) -> Response:
        if not request.url.path.startswith(RATE_LIMITED_PREFIX):
            return await call_next(request)
        result = limiter.hit(client_ip(request))
        headers = {
            "RateLimit-Limit": str(result.limit),
            "RateLimit-Remaining": str(result.remaining),
            "RateLimit-Reset": str(result.reset_after),
        }
        if not result.allowed:
            logger.warning(
                "Rate limit exceeded",
                extra={"ip": client_ip(request), "path": request.url.path},
            )
            headers["Retry-After"] = str(limiter.window_seconds)
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={
                    "success": False,
                    "message": "Too many requests from this IP, please try again later.",
                    "retryAfter": limiter.window_seconds,
                },
                headers=headers,
            )
        response = await call_next(request)
        response.headers.update(headers)
        return response

    return middleware


def body_size_limit_middleware(max_bytes: int) -> Callable[[Request, CallNext], Awaitable[Response]]:
    """Reject requests whose declared Content-Length exceeds max_bytes."""

    async def middleware(request: Request, call_next: CallNext) -> Response:
        content_length = request.headers.get("content-length")
        if content_length is not None:
            try:
                declared = int(content_length)
            except ValueError:
                declared = -1
            if declared < 0:
                return JSONResponse(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    content={"success": False, "message": "Invalid Content-Length header", "errors": []},
                )
            if declared > max_bytes:
                return JSONResponse(
                    status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                    content={
                        "success": False,
                        "message": "Request body too large",
                        "errors": [f"Maximum body size is {max_bytes} bytes"],
                    },
                )
        return await call_next(request)

    return middleware


async def request_logging_middleware(request: Request, call_next: CallNext) -> Response:
    """One INFO line per request with method, path, client and timing."""
    started = time.perf_counter()
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        _log_request(request, status_code, round((time.perf_counter() - started) * 1000, 1))


def _log_request(request: Request, status_code: int, duration_ms: float) -> None:
    logger.info(
        "%s %s - %s",
        request.method,
        request.url.path,
        client_ip(request),
        extra={
            "method": request.method,
            "path": request.url.path,
            "ip": client_ip(request),
            "user_agent": request.headers.get("user-agent", ""),
            "status_code": status_code,
            "duration_ms": duration_ms,
        },
    )
