"""
Rate limiting middleware to slow down brute force and runaway clients.

Uses in-memory storage. With several workers each process keeps its own
window, so the effective limit is multiplied by the worker count.
"""
import logging
import time
from collections import defaultdict
from typing import Dict, Tuple

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from voicepos.core.config import settings
from voicepos.core.exceptions import BusinessError
from voicepos.core.security import decode_access_token

logger = logging.getLogger(__name__)

EXEMPT_PATHS = ("/health", "/docs", "/redoc", "/openapi.json")


class RateLimiter:
    """In-memory rate limiter with sliding window."""

    def __init__(self, requests: int = 100, window: int = 60):
        """
        Args:
            requests: Maximum requests allowed in window
            window: Time window in seconds
        """
        self.requests = requests
        self.window = window
        self.clients: Dict[str, list] = defaultdict(list)
        self.last_cleanup = time.time()

    def is_allowed(self, client_id: str) -> Tuple[bool, int]:
        """
        Check if client is allowed to make request.

        Returns:
            (allowed, remaining)
        """
        now = time.time()

        # Cleanup old entries every 5 minutes
        if now - self.last_cleanup > 300:
            self._cleanup(now)
            self.last_cleanup = now

        cutoff = now - self.window
        timestamps = [ts for ts in self.clients[client_id] if ts > cutoff]
        self.clients[client_id] = timestamps

        if len(timestamps) < self.requests:
            timestamps.append(now)
            return True, self.requests - len(timestamps)
        return False, 0

    def reset(self):
        self.clients.clear()

    def _cleanup(self, now: float):
        """Remove expired entries to prevent memory bloat."""
        cutoff = now - self.window
        for client_id in list(self.clients.keys()):
            timestamps = [ts for ts in self.clients[client_id] if ts > cutoff]
            if timestamps:
                self.clients[client_id] = timestamps
            else:
                del self.clients[client_id]

        logger.info(f"Rate limiter cleanup: {len(self.clients)} active clients")


rate_limiter = RateLimiter(
    requests=settings.RATE_LIMIT_REQUESTS,
    window=settings.RATE_LIMIT_WINDOW_SECONDS,
)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Apply rate limiting to all requests except health and docs."""

    async def dispatch(self, request: Request, call_next):
        if request.url.path in EXEMPT_PATHS:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"

        # Authenticated tills behind one NAT should not share a bucket.
        # Only a token that verifies earns its own bucket; anything else counts against the IP.
        client_id = f"ip:{client_ip}"
        auth_header = request.headers.get("authorization", "")
        if auth_header.startswith("Bearer "):
            subject = decode_access_token(auth_header[len("Bearer "):].strip())
            if subject:
                client_id = f"user:{subject}"

        allowed, remaining = rate_limiter.is_allowed(client_id)

        if not allowed:
            error = BusinessError.rate_limit_exceeded(
                f"{client_id} on {request.method} {request.url.path}"
            )
            return JSONResponse(
                status_code=error.status_code,
                content={
                    "detail": f"Rate limit exceeded. Try again in {settings.RATE_LIMIT_WINDOW_SECONDS} seconds."
                },
                headers={
                    "Retry-After": str(settings.RATE_LIMIT_WINDOW_SECONDS),
                    "X-RateLimit-Limit": str(settings.RATE_LIMIT_REQUESTS),
                    "X-RateLimit-Remaining": "0",
                },
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(settings.RATE_LIMIT_REQUESTS)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        response.headers["X-RateLimit-Window"] = str(settings.RATE_LIMIT_WINDOW_SECONDS)
        return response
