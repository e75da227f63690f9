"""
Rate Limiting Middleware

Per-IP fixed-window rate limiting for the login endpoint, to slow down
password guessing. Other paths pass through untouched.
"""
import logging
import time
from collections import defaultdict
from typing import Iterable

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many login attempts. Please try again later."


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Rate limiting middleware for login attempts

    Counts POST requests to the protected paths per client IP within a
    window of ``window`` seconds. Once ``limit`` is reached the client gets
    429 with a Retry-After header until the window ends.
    """

    def __init__(
        self,
        app,
        limit: int = 20,
        window: int = 60,
        paths: Iterable[str] = ("/users/login",),
    ):
        """
        Args:
            app: ASGI application
            limit: Maximum attempts per window
            window: Window length in seconds
            paths: Request paths subject to the limit
        """
        super().__init__(app)
        self.limit = limit
        self.window = window
        self.paths = frozenset(paths)

        # IP -> (window start, attempts)
        self.attempts: dict[str, tuple[float, int]] = defaultdict(lambda: (time.time(), 0))
        self.last_cleanup = time.time()

    def _cleanup_old_entries(self) -> None:
        current_time = time.time()
        if current_time - self.last_cleanup < self.window:
            return

        expired_ips = [
            ip for ip, (started, _) in self.attempts.items()
            if current_time - started > self.window
        ]
        for ip in expired_ips:
            del self.attempts[ip]

        self.last_cleanup = current_time
        if expired_ips:
            logger.debug(f"Cleaned up login rate limit entries for {len(expired_ips)} IPs")

    def _register_attempt(self, ip: str) -> tuple[bool, int]:
        """
        Count one attempt from ``ip``.

        Returns:
            Tuple of (is_allowed, remaining_attempts)
        """
        current_time = time.time()
        started, count = self.attempts[ip]

        if current_time - started >= self.window:
            self.attempts[ip] = (current_time, 1)
            return True, self.limit - 1

        if count >= self.limit:
            return False, 0

        self.attempts[ip] = (started, count + 1)
        return True, self.limit - (count + 1)

    async def dispatch(self, request: Request, call_next):
        if request.method != "POST" or request.url.path not in self.paths:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        self._cleanup_old_entries()

        allowed, remaining = self._register_attempt(client_ip)
        started, _ = self.attempts[client_ip]

        if not allowed:
            retry_after = int(self.window - (time.time() - started)) + 1
            logger.warning(
                f"Login rate limit exceeded for IP {client_ip}",
                extra={"ip": client_ip, "limit": self.limit, "window": self.window},
            )
            return JSONResponse(
                status_code=429,
                content={"error": RATE_LIMIT_MESSAGE},
                headers={
                    "X-RateLimit-Limit": str(self.limit),
                    "X-RateLimit-Remaining": "0",
                    "Retry-After": str(retry_after),
                },
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self.limit)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        return response
