from __future__ import annotations

from collections.abc import Callable, Iterable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

# A JSON API never serves markup of its own, so the policy can stay locked down.
DEFAULT_CSP = (
    "default-src 'self'",
    "base-uri 'self'",
    "font-src 'self' https: data:",
    "form-action 'self'",
    "frame-ancestors 'self'",
    "img-src 'self' data:",
    "object-src 'none'",
    "script-src 'self'",
    "script-src-attr 'none'",
    "style-src 'self' https: 'unsafe-inline'",
    "upgrade-insecure-requests",
)


def _is_secure_request(request: Request) -> bool:
    # Honor reverse proxy headers if present
    xf_proto = request.headers.get("x-forwarded-proto")
    if xf_proto:
        return "https" in xf_proto
    return request.url.scheme == "https"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Applies a fixed set of security headers to every response.
    - CSP and cross-origin isolation headers
    - HSTS only on HTTPS requests outside local hosts
    - Headers already set by a handler are left alone
    """

    def __init__(
        self,
        app,
        *,
        csp_directives: Iterable[str] | None = None,
        hsts: str = "max-age=15552000; includeSubDomains",
        referrer_policy: str = "no-referrer",
        frame_options: str = "SAMEORIGIN",
        skip_hsts_hosts: set[str] | None = None,
    ) -> None:
        super().__init__(app)
        self.hsts = hsts
        self.skip_hsts_hosts = skip_hsts_hosts or {"localhost", "127.0.0.1"}
        self.headers: dict[str, str] = {
            "Content-Security-Policy": "; ".join(csp_directives or DEFAULT_CSP),
            "Cross-Origin-Opener-Policy": "same-origin",
            "Cross-Origin-Resource-Policy": "same-origin",
            "Origin-Agent-Cluster": "?1",
            "Referrer-Policy": referrer_policy,
            "X-Content-Type-Options": "nosniff",
            "X-DNS-Prefetch-Control": "off",
            "X-Download-Options": "noopen",
            "X-Frame-Options": frame_options,
            "X-Permitted-Cross-Domain-Policies": "none",
            "X-XSS-Protection": "0",
        }

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        for name, value in self.headers.items():
            response.headers.setdefault(name, value)

        if _is_secure_request(request):
            if request.url.hostname not in self.skip_hsts_hosts:
                response.headers.setdefault("Strict-Transport-Security", self.hsts)

        # Do not advertise the server stack
        if "server" in response.headers:
            del response.headers["server"]
        return response
