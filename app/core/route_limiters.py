"""
Description:
This module sets up request throttling for the application routes.

- limiter: a SlowAPI Limiter keyed by the client's IP address with a default
  limit, used for plain per-route limits (e.g. the health check).
- rate_limit(): a FastAPI dependency factory backed by the application's
  fixed-window RateLimiter, used on AI-backed endpoints where the client needs
  the window reset time back in the 429 body.

Dependencies:
- slowapi: For decorator-based rate limiting.
- slowapi.util: For get_remote_address to retrieve the client's IP address.
- app.core.rate_limiter: For the fixed-window limiter shared by AI endpoints.
- loguru: For logging information about the rate limiter initialization.

Author: @kcaparas1630
"""
from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address
from loguru import logger
from app.core.rate_limiter import RateLimiter
from app.errors.exceptions import RateLimitExceededError

# Set up rate limiter (e.g., 5 requests per minute per IP)
limiter = Limiter(key_func=get_remote_address, default_limits=["5/minute"])
logger.info("Rate limiter initialized")

# Shared fixed-window limiter for AI-backed endpoints
ai_rate_limiter = RateLimiter()


def get_client_identifier(request: Request) -> str:
    """First X-Forwarded-For hop, then X-Real-IP, then the socket peer."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    if request.client and request.client.host:
        return request.client.host
    return "anonymous"


def rate_limit(action: str, max_requests: int, window_ms: int):
    """
    Build a dependency that counts one request against `action` for the caller.

    Usage:
        @router.post("/generate", dependencies=[Depends(rate_limit("generate-questions", 3, 600_000))])

    Raises:
        RateLimitExceededError: When the caller has used up the window (HTTP 429).
    """
    async def dependency(request: Request) -> None:
        # Read through app.state so tests can swap in a limiter with a fake clock
        rate_limiter = getattr(request.app.state, "ai_rate_limiter", None) or ai_rate_limiter
        identifier = get_client_identifier(request)
        result = rate_limiter.check_rate_limit(action, identifier, max_requests, window_ms)
        if not result.success:
            raise RateLimitExceededError(reset_time=result.reset_time)

    return dependency
