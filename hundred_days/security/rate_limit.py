"""Global request rate limiting."""

from __future__ import annotations

from slowapi import Limiter
from slowapi.util import get_remote_address

from hundred_days.config import settings

# Applied to every route through SlowAPIMiddleware: 100 requests per
# 15 minutes per client address by default.
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.rate_limit],
    enabled=settings.rate_limit_enabled,
)
