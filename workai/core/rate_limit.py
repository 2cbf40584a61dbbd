from __future__ import annotations

from slowapi import Limiter
from slowapi.util import get_remote_address

from workai.core.config import settings

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.rate_limit],
    enabled=settings.rate_limit_enabled,
)


def rate_limit(limit: str | None = None):
    """Per-route limit; defaults to the global RATE_LIMIT value."""
    if settings.rate_limit_enabled:
        return limiter.limit(limit or settings.rate_limit)

    def decorator(func):
        return func

    return decorator
