"""
FastAPI application entry point.
Configures the browser security middleware and lifecycle events.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse

from browser_security.bootstrap import BrowserSecurity, bootstrap
from browser_security.core.cache import RedisCacheStore
from browser_security.core.config import get_settings
from browser_security.core.logging import configure_logging, get_logger
from browser_security.core.middleware import CorsOriginGuardMiddleware, SecurityHeadersMiddleware

configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Closes the integrity hash cache connection on shutdown.
    """
    security: BrowserSecurity = app.state.security
    logger.info(
        "starting_application",
        environment=security.settings.environment,
        version=security.settings.version,
    )

    yield

    cache = security.hasher.cache
    if isinstance(cache, RedisCacheStore):
        await cache.close()
    logger.info("application_shutdown_complete")


def create_application(security: BrowserSecurity | None = None) -> FastAPI:
    """
    Application factory function.

    Creates the FastAPI application with the security middleware applied.
    """
    security = security or bootstrap(get_settings())
    settings = security.settings

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        lifespan=lifespan,
    )
    app.state.security = security

    # ==========================================================================
    # Middleware Configuration
    # ==========================================================================

    # Security headers wrap the origin guard so denied responses carry them too.
    app.add_middleware(CorsOriginGuardMiddleware, security=security)
    app.add_middleware(SecurityHeadersMiddleware, security=security)

    # ==========================================================================
    # Routes
    # ==========================================================================

    @app.get("/health", tags=["Health"])
    async def health_check() -> dict[str, object]:
        return {
            "status": "ok",
            "cache": type(security.hasher.cache).__name__,
            "automatic_integrity": settings.automatic_integrity,
        }

    @app.get("/", response_class=HTMLResponse, include_in_schema=False)
    async def index(request: Request) -> HTMLResponse:
        sec: BrowserSecurity = request.app.state.security
        styles = [await sec.render_style(handle) for handle in sec.styles.handles()]
        scripts = [await sec.render_script(handle) for handle in sec.scripts.handles()]
        return HTMLResponse(
            "<!DOCTYPE html>\n<html>\n<head>\n"
            f"<title>{settings.project_name}</title>\n"
            f"{''.join(styles)}"
            "</head>\n<body>\n"
            f"{''.join(scripts)}"
            "</body>\n</html>\n"
        )

    return app


app = create_application()
