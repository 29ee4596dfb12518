from collections import defaultdict
from collections import deque
from collections.abc import Awaitable
from collections.abc import Callable
from threading import RLock
from time import monotonic

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response


class ChartRateLimitMiddleware(BaseHTTPMiddleware):
    """In-memory sliding-window rate limiter for chart rendering requests.

    Buckets are keyed by client address and requested username; charts
    embedded behind a shared image proxy all arrive from one address.
    """

    def __init__(
        self,
        app,
        requests_per_window: int = 30,
        window_seconds: int = 60,
        path: str = "/chart",
    ) -> None:
        super().__init__(app)
        self.max_requests = max(1, requests_per_window)
        self.window_seconds = max(1, window_seconds)
        self.path = path
        # One queue of request timestamps per (client, username) key.
        self._buckets: dict[str, deque[float]] = defaultdict(deque)
        self._lock = RLock()

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        # Only chart rendering is limited.
        if request.method != "GET" or request.url.path != self.path:
            return await call_next(request)

        key = self._bucket_key(request)
        now = monotonic()

        with self._lock:
            bucket = self._buckets[key]
            cutoff = now - self.window_seconds
            while bucket and bucket[0] <= cutoff:
                bucket.popleft()

            if len(bucket) >= self.max_requests:
                retry_after = max(1, int(self.window_seconds - (now - bucket[0])))
                return JSONResponse(
                    status_code=429,
                    content={"detail": "Too Many Requests"},
                    headers={"Retry-After": str(retry_after)},
                )

            bucket.append(now)

        return await call_next(request)

    @classmethod
    def _bucket_key(cls, request: Request) -> str:
        username = request.query_params.get("username", "").strip().lower()
        return f"{cls._client_ip(request)}|{username}"

    @staticmethod
    def _client_ip(request: Request) -> str:
        # README image proxies and reverse proxies set X-Forwarded-For.
        forwarded_for = request.headers.get("x-forwarded-for")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip() or "unknown"

        if request.client and request.client.host:
            return request.client.host

        return "unknown"
