"""Rate limiting (slowapi), shared across workers through Redis when available."""

import hashlib
import logging

import redis
from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings
from app.core.deps import COOKIE_NAME

logger = logging.getLogger(__name__)


def rate_limit_key(request: Request) -> str:
    """Limit per signed-in session, falling back to client address."""
    token = request.cookies.get(COOKIE_NAME)
    if token:
        return "session:" + hashlib.sha256(token.encode()).hexdigest()[:32]
    return get_remote_address(request)


def _storage_uri() -> str:
    if settings.TESTING:
        return "memory://"
    try:
        redis.from_url(settings.REDIS_URL, socket_connect_timeout=1).ping()
    except redis.RedisError as e:
        logger.warning("Redis unavailable for rate limiting, using in-memory: %s", e)
        return "memory://"
    return settings.REDIS_URL


default_limits = (
    [f"{settings.RATE_LIMIT_API}/minute"]
    if settings.RATE_LIMIT_API > 0 and not settings.TESTING
    else []
)

limiter = Limiter(
    key_func=rate_limit_key,
    storage_uri=_storage_uri(),
    default_limits=default_limits,
    enabled=not settings.TESTING,
)
