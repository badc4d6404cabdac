"""
Unit tests for the security headers and CORS origin middleware.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from browser_security.bootstrap import BrowserSecurity, bootstrap
from browser_security.core.cache import MemoryCacheStore
from browser_security.core.config import Settings
from browser_security.core.hooks import HOOK_CORS_ALLOW_ORIGIN
from browser_security.integrity.hashing import compute_integrity
from browser_security.main import app as default_app
from browser_security.main import create_application
from browser_security.policy.csp import PolicyMode

SITE_URL = "https://example.com/"


@pytest_asyncio.fixture
async def client(security: BrowserSecurity) -> AsyncGenerator[AsyncClient, None]:
    app = create_application(security)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.mark.asyncio
async def test_static_headers_present(client: AsyncClient) -> None:
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "SAMEORIGIN"
    assert response.headers["X-XSS-Protection"] == "1; mode=block"


@pytest.mark.asyncio
async def test_no_csp_headers_by_default(client: AsyncClient) -> None:
    response = await client.get("/health")
    assert "Content-Security-Policy" not in response.headers
    assert "Content-Security-Policy-Report-Only" not in response.headers


@pytest.mark.asyncio
async def test_csp_headers_from_hooks(security: BrowserSecurity, client: AsyncClient) -> None:
    def policies(values: dict[str, Any]) -> dict[str, Any]:
        values["object-src"] = "none"
        return values

    security.hooks.add_filter(PolicyMode.ENFORCING.policies_hook, policies)
    security.hooks.add_filter(
        PolicyMode.REPORT_ONLY.directive_hook("script-src"), lambda value: ["self"]
    )

    response = await client.get("/health")

    assert response.headers["Content-Security-Policy"] == "object-src 'none'"
    # Tokens returned by value hooks are used as-is.
    assert response.headers["Content-Security-Policy-Report-Only"] == "script-src self"


@pytest.mark.asyncio
async def test_policy_rebuilt_per_request(security: BrowserSecurity, client: AsyncClient) -> None:
    first = await client.get("/health")
    security.hooks.add_filter(
        PolicyMode.ENFORCING.directive_hook("img-src"), lambda value: ["'self'", "data:"]
    )
    second = await client.get("/health")

    assert "Content-Security-Policy" not in first.headers
    assert second.headers["Content-Security-Policy"] == "img-src 'self' data:"


@pytest.mark.asyncio
async def test_disabled_static_headers(web_root: Path) -> None:
    settings = Settings(
        _env_file=None,
        site_url=SITE_URL,
        web_root=str(web_root),
        nosniff_header=False,
        frame_options_header=False,
        xss_protection_header=False,
    )
    app = create_application(bootstrap(settings, cache=MemoryCacheStore()))
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        response = await ac.get("/health")

    assert "X-Content-Type-Options" not in response.headers
    assert "X-Frame-Options" not in response.headers
    assert "X-XSS-Protection" not in response.headers


@pytest.mark.asyncio
async def test_denied_origin(security: BrowserSecurity, client: AsyncClient) -> None:
    security.hooks.add_filter(
        HOOK_CORS_ALLOW_ORIGIN, lambda allow, origin: allow and ".local" not in origin
    )

    denied = await client.get("/health", headers={"Origin": "https://example.local"})
    allowed = await client.get("/health", headers={"Origin": "https://example.com"})

    assert denied.status_code == 403
    assert denied.json()["code"] == "cors_origin_not_allowed"
    assert denied.headers["X-Content-Type-Options"] == "nosniff"
    assert allowed.status_code == 200


@pytest.mark.asyncio
async def test_index_renders_integrity(
    security: BrowserSecurity, client: AsyncClient, web_root: Path
) -> None:
    security.scripts.register("app", SITE_URL + "wp-content/themes/site/app.js", "1.0")
    security.scripts.register("cdn", "https://cdn.example.net/lib.js")
    security.styles.register("theme", SITE_URL + "wp-content/themes/site/style.css")

    response = await client.get("/")

    script_hash = compute_integrity(
        (web_root / "wp-content" / "themes" / "site" / "app.js").read_bytes()
    )
    style_hash = compute_integrity(
        (web_root / "wp-content" / "themes" / "site" / "style.css").read_bytes()
    )
    assert response.status_code == 200
    assert f"integrity='{script_hash}'" in response.text
    assert f"integrity='{style_hash}'" in response.text
    assert "<script type='text/javascript' src='https://cdn.example.net/lib.js'>" in response.text


def test_module_level_app_is_served() -> None:
    assert isinstance(default_app, FastAPI)
    assert isinstance(default_app.state.security, BrowserSecurity)
