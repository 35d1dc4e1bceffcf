"""Security middleware - headers, rate limiting."""

import logging
from typing import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware

from surveydesk.core.config import settings
from surveydesk.core.exceptions import RateLimitExceededError
from surveydesk.db.redis import get_redis

logger = logging.getLogger(__name__)


# JSON responses load nothing and are never framed
API_CSP = "default-src 'none'; frame-ancestors 'none'"
DOCS_PATHS = ("/docs", "/redoc", "/openapi.json")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Add security headers to all responses.

    Every API response gets a deny-all CSP; the interactive docs keep the default
    policy so their assets load in development. Sign-in and account responses carry
    tokens and are marked uncacheable. HSTS is only sent in production, behind TLS.
    """

    def __init__(self, app):
        super().__init__(app)
        self.no_store_prefixes = (
            f"{settings.api_prefix}/auth",
            f"{settings.api_prefix}/staff",
        )

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        path = request.url.path

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "no-referrer"

        if "server" in response.headers:
            del response.headers["server"]

        if path not in DOCS_PATHS:
            response.headers["Content-Security-Policy"] = API_CSP

        if path.startswith(self.no_store_prefixes):
            response.headers["Cache-Control"] = "no-store"

        if settings.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Simple rate limiting middleware using Redis.

    Limits requests per IP address and path within a time window. The public
    survey endpoint is the main target.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Skip rate limiting for health checks
        if request.url.path in ["/health", "/", "/docs", "/redoc", "/openapi.json"]:
            return await call_next(request)

        client_ip = self._get_client_ip(request)
        current = None

        try:
            redis = get_redis()
            key = f"rate_limit:{client_ip}:{request.url.path}"

            current = await redis.get(key)

            if current and int(current) >= settings.rate_limit_requests:
                exc = RateLimitExceededError(retry_after=settings.rate_limit_window_seconds)
                return JSONResponse(
                    status_code=exc.status_code,
                    content={
                        "error": {
                            "code": exc.error_code,
                            "message": exc.message,
                            "details": exc.details,
                        }
                    },
                    headers={
                        "Retry-After": str(settings.rate_limit_window_seconds),
                        "X-RateLimit-Limit": str(settings.rate_limit_requests),
                        "X-RateLimit-Remaining": "0",
                    },
                )

            pipe = redis.pipeline()
            pipe.incr(key)
            pipe.expire(key, settings.rate_limit_window_seconds)
            await pipe.execute()

        except (RedisError, RuntimeError) as e:
            # Redis unavailable: allow the request
            logger.warning(f"Rate limiting skipped: {e}")

        response = await call_next(request)

        remaining = settings.rate_limit_requests - int(current or 0) - 1
        response.headers["X-RateLimit-Limit"] = str(settings.rate_limit_requests)
        response.headers["X-RateLimit-Remaining"] = str(max(0, remaining))

        return response

    def _get_client_ip(self, request: Request) -> str:
        """Extract client IP from request, handling proxies."""
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            # Take the first IP (original client)
            return forwarded.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip

        if request.client:
            return request.client.host

        return "unknown"
