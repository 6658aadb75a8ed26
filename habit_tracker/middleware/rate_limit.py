from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse
import redis
from habit_tracker.config import settings
from habit_tracker.utils.logger import get_logger

logger = get_logger(__name__)


def _redis_available() -> bool:
    if not settings.RATE_LIMIT_ENABLED:
        return False
    try:
        client = redis.Redis(
            host=settings.REDIS_HOST,
            port=settings.REDIS_PORT,
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2
        )
        client.ping()
        logger.info(f"Rate limiting Redis connected: {settings.REDIS_HOST}:{settings.REDIS_PORT}")
        return True
    except redis.RedisError as e:
        logger.warning(f"Rate limiting Redis connection failed: {e}. Using in-memory fallback.")
        return False


def get_user_id_or_ip(request: Request):
    """
    Rate limit key: the authenticated user when known, otherwise the client IP.
    """
    user_id = getattr(request.state, 'user_id', None)
    if user_id:
        return f"user:{user_id}"
    return f"ip:{get_remote_address(request)}"


limiter = Limiter(
    key_func=get_user_id_or_ip,
    storage_uri=f"redis://{settings.REDIS_HOST}:{settings.REDIS_PORT}" if _redis_available() else "memory://",
    default_limits=[settings.RATE_LIMIT_DEFAULT],
    enabled=settings.RATE_LIMIT_ENABLED,
)

RATE_LIMITS = {
    # Credential endpoints
    "auth": "10/minute",

    # Writes against the store
    "api_write": "100/hour",

    # Public share pages
    "share_public": "60/minute",
}


def get_rate_limit_for_endpoint(endpoint: str) -> str:
    """Get rate limit configuration for specific endpoint."""
    return RATE_LIMITS.get(endpoint, "100/hour")


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """429 in the API's error shape, with retry hints."""
    return JSONResponse(
        status_code=429,
        content={
            "message": f"Rate limit exceeded: {exc.detail}. Please try again later.",
            "code": "RATE_LIMITED",
        },
        headers={
            "Retry-After": "60",
            "X-RateLimit-Remaining": "0",
        },
    )


def rate_limit_auth(func):
    """Rate limit for authentication endpoints."""
    return limiter.limit(get_rate_limit_for_endpoint("auth"))(func)


def rate_limit_api_write(func):
    """Rate limit for write API endpoints."""
    return limiter.limit(get_rate_limit_for_endpoint("api_write"))(func)


def rate_limit_share_public(func):
    """Rate limit for the public share page."""
    return limiter.limit(get_rate_limit_for_endpoint("share_public"))(func)
