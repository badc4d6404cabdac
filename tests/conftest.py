"""
Pytest fixtures for browser security testing.
Provides a temporary site layout, settings, and a bootstrapped context.
"""

from pathlib import Path

import pytest

from browser_security.bootstrap import BrowserSecurity, bootstrap
from browser_security.core.cache import MemoryCacheStore
from browser_security.core.config import Settings
from browser_security.core.hooks import HookRegistry

SITE_URL = "https://example.com/"


@pytest.fixture
def web_root(tmp_path: Path) -> Path:
    """A web root holding the installer marker, a theme and core assets."""
    root = tmp_path / "public"
    (root / "wp-content" / "themes" / "site").mkdir(parents=True)
    (root / "wp-includes" / "js").mkdir(parents=True)
    (root / "wp-config.php").write_text("<?php\n")
    (root / "wp-content" / "themes" / "site" / "app.js").write_text("console.log('app');\n")
    (root / "wp-content" / "themes" / "site" / "style.css").write_text("body { margin: 0; }\n")
    (root / "wp-includes" / "js" / "jquery.js").write_text("/* jquery */\n")
    return root


@pytest.fixture
def settings(web_root: Path) -> Settings:
    return Settings(_env_file=None, site_url=SITE_URL, web_root=str(web_root))


@pytest.fixture
def hooks() -> HookRegistry:
    return HookRegistry()


@pytest.fixture
def cache() -> MemoryCacheStore:
    return MemoryCacheStore()


@pytest.fixture
def security(settings: Settings, hooks: HookRegistry, cache: MemoryCacheStore) -> BrowserSecurity:
    return bootstrap(settings, hooks=hooks, cache=cache)
