from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse
import redis

from auth.utils import decode_access_token
from core.config import REDIS_URL, ALLOWED_ORIGINS
from core.logging_config import get_logger

logger = get_logger(__name__)


def resolve_storage_uri(redis_url: str) -> str:
    """Shared Redis counters when the server answers a ping, per-process counters otherwise."""
    try:
        redis.from_url(redis_url, socket_connect_timeout=2).ping()
    except redis.RedisError as e:
        logger.warning("Redis unavailable at %s (%s), rate limits are kept in memory", redis_url, e)
        return "memory://"
    return redis_url


def get_identifier(request: Request) -> str:
    """
    Rate limit key: the bearer token's user id when it decodes, otherwise the client IP.
    """
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() == "bearer" and token:
        token_data = decode_access_token(token)
        if token_data is not None:
            return f"user:{token_data.user_id}"

    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


limiter = Limiter(
    key_func=get_identifier,
    storage_uri=resolve_storage_uri(REDIS_URL),
    strategy="fixed-window"
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """429 for feedback requests over the limit; allowed origins still get their CORS headers"""
    logger.info("Rate limit hit for %s on %s", get_identifier(request), request.url.path)

    origin = request.headers.get("origin", "")
    headers = {"Retry-After": "60"}
    if origin in ALLOWED_ORIGINS:
        headers["Access-Control-Allow-Origin"] = origin
        headers["Access-Control-Allow-Credentials"] = "true"

    return JSONResponse(
        status_code=429,
        content={"error": "Too many feedback requests", "detail": str(exc.detail)},
        headers=headers
    )
