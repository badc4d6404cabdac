"""
Security headers and CORS origin middleware.
Adds the configured static headers and the per-request CSP headers to every response.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from browser_security.core.logging import get_logger

if TYPE_CHECKING:
    from browser_security.bootstrap import BrowserSecurity

logger = get_logger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    def __init__(self, app: ASGIApp, security: BrowserSecurity) -> None:
        super().__init__(app)
        self.security = security

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)

        for name, value in self.security.static_headers().items():
            response.headers[name] = value

        # Policy sets are rebuilt per request so hooks may vary them.
        for name, value in self.security.policy_headers().items():
            response.headers[name] = value

        return response


class CorsOriginGuardMiddleware(BaseHTTPMiddleware):
    """Reject cross-origin requests whose Origin the ``cors_allow_origin`` hooks refuse."""

    def __init__(self, app: ASGIApp, security: BrowserSecurity) -> None:
        super().__init__(app)
        self.security = security

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        denied = self.security.restrict_cors_origin(request.headers.get("origin"))
        if denied is not None:
            logger.warning("cors_origin_denied", origin=denied.origin, path=request.url.path)
            return JSONResponse(
                status_code=denied.status_code,
                content={"detail": denied.reason, "code": denied.code},
            )
        return await call_next(request)
