"""Middleware to redirect HTTP requests to HTTPS."""
from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse

from arboretum.core.config import get_settings


class HTTPSRedirectMiddleware(BaseHTTPMiddleware):
    """Redirect plain-HTTP requests to HTTPS so session cookies never travel in clear text."""

    def __init__(self, app, https_port: int = 8443):
        super().__init__(app)
        self.https_port = https_port
        self.settings = get_settings()

    async def dispatch(self, request: Request, call_next):
        if not self.settings.ssl_enabled:
            return await call_next(request)

        # Honour the scheme reported by a reverse proxy
        scheme = request.headers.get("X-Forwarded-Proto", request.url.scheme)
        if scheme != "http":
            return await call_next(request)

        host = request.headers.get("X-Forwarded-Host", request.headers.get("Host", "localhost"))
        host = host.split(":")[0]
        port_suffix = "" if self.https_port == 443 else f":{self.https_port}"

        https_url = f"https://{host}{port_suffix}{request.url.path}"
        if request.url.query:
            https_url += f"?{request.url.query}"

        # 308 keeps the method and body of POST/PUT/DELETE requests intact.
        return RedirectResponse(url=https_url, status_code=308)
