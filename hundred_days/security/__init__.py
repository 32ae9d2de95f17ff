"""Security façade for rate limiting and headers middleware."""

from hundred_days.middleware.cors import OriginAllowListMiddleware  # noqa: F401
from hundred_days.middleware.security import SecurityHeadersMiddleware  # noqa: F401

from .rate_limit import limiter  # noqa: F401

__all__ = [
    "limiter",
    "OriginAllowListMiddleware",
    "SecurityHeadersMiddleware",
]
