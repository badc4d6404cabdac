"""
Wire the browser security collaborators together.

``bootstrap()`` builds a ``BrowserSecurity`` context holding the hook
registry, the integrity hash cache and the script/style registries. All
operations go through the context; nothing is registered globally.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import partial
from typing import Any

from browser_security.core.cache import CacheStore, create_cache_store
from browser_security.core.config import Settings, get_settings
from browser_security.core.hooks import HookRegistry
from browser_security.core.logging import asset_log_context, get_logger
from browser_security.integrity.assets import (
    AssetRegistry,
    DependencyRegistry,
    generate_hash_for_asset,
    get_hash_for_asset,
    set_hash_for_asset,
)
from browser_security.integrity.errors import IntegrityError
from browser_security.integrity.hashing import HashOverride, HashPostProcessor, IntegrityHasher
from browser_security.integrity.tags import output_integrity_for_script, output_integrity_for_style
from browser_security.policy.cors import CorsOriginDenied, restrict_cors_origin
from browser_security.policy.csp import PolicyMode, get_policy_header, merge_static_policies

logger = get_logger(__name__)


@dataclass
class BrowserSecurity:
    """Per-process context shared by the integrity and header pipelines."""

    settings: Settings
    hooks: HookRegistry
    hasher: IntegrityHasher
    scripts: DependencyRegistry = field(default_factory=lambda: DependencyRegistry("script"))
    styles: DependencyRegistry = field(default_factory=lambda: DependencyRegistry("style"))

    # ==========================================================================
    # Integrity hashes
    # ==========================================================================

    async def generate_hash_for_asset(
        self, registry: AssetRegistry, handle: str
    ) -> IntegrityError | None:
        return await generate_hash_for_asset(
            registry,
            handle,
            hasher=self.hasher,
            site_url=self.settings.site_url,
            web_root=self.settings.web_root,
            root_dir=self.settings.root_dir,
        )

    async def generate_hash_for_path(self, path: str, version: str | None = None) -> str | None:
        return await self.hasher.generate_hash_for_path(path, version)

    def get_hash_for_script(self, handle: str) -> str | None:
        return get_hash_for_asset(self.scripts, handle)

    def get_hash_for_style(self, handle: str) -> str | None:
        return get_hash_for_asset(self.styles, handle)

    def set_hash_for_script(self, handle: str, hash_value: str) -> bool:
        return set_hash_for_asset(self.scripts, handle, hash_value)

    def set_hash_for_style(self, handle: str, hash_value: str) -> bool:
        return set_hash_for_asset(self.styles, handle, hash_value)

    async def filter_script_tag(self, tag: str, handle: str) -> str:
        """Add the integrity attribute to a rendered script tag."""
        if self.settings.automatic_integrity:
            await self._generate_and_log(self.scripts, handle)
        return output_integrity_for_script(tag, self.get_hash_for_script(handle))

    async def filter_style_tag(self, html: str, handle: str) -> str:
        """Add the integrity attribute to a rendered stylesheet tag."""
        if self.settings.automatic_integrity:
            await self._generate_and_log(self.styles, handle)
        return output_integrity_for_style(html, self.get_hash_for_style(handle))

    async def render_script(self, handle: str) -> str:
        return await self.filter_script_tag(self.scripts.render_tag(handle), handle)

    async def render_style(self, handle: str) -> str:
        return await self.filter_style_tag(self.styles.render_tag(handle), handle)

    async def _generate_and_log(self, registry: AssetRegistry, handle: str) -> None:
        with asset_log_context(registry.kind, handle):
            err = await self.generate_hash_for_asset(registry, handle)
        if err is not None:
            logger.warning(
                "integrity_hash_failed",
                kind=registry.kind,
                handle=handle,
                code=err.code,
                src=err.src,
                error=str(err),
            )

    # ==========================================================================
    # Response headers
    # ==========================================================================

    def static_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self.settings.nosniff_header:
            headers["X-Content-Type-Options"] = "nosniff"
        if self.settings.frame_options_header:
            headers["X-Frame-Options"] = "SAMEORIGIN"
        if self.settings.xss_protection_header:
            headers["X-XSS-Protection"] = "1; mode=block"
        return headers

    def policy_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        for mode in (PolicyMode.ENFORCING, PolicyMode.REPORT_ONLY):
            header = get_policy_header(self.hooks, mode)
            if header is not None:
                name, value = header
                headers[name] = value
        return headers

    def restrict_cors_origin(
        self, origin: str | None, default: bool = True
    ) -> CorsOriginDenied | None:
        return restrict_cors_origin(self.hooks, origin, default)


def _add_static_policies(additions: dict[str, Any], policies: dict[str, Any]) -> dict[str, Any]:
    return merge_static_policies(policies, additions)


def bootstrap(
    settings: Settings | None = None,
    *,
    hooks: HookRegistry | None = None,
    cache: CacheStore | None = None,
    hash_override: HashOverride | None = None,
    hash_post_process: HashPostProcessor | None = None,
) -> BrowserSecurity:
    """Build a ``BrowserSecurity`` context from *settings*."""
    settings = settings or get_settings()
    hooks = hooks if hooks is not None else HookRegistry()
    cache = cache if cache is not None else create_cache_store(settings)

    if settings.content_security_policy:
        hooks.add_filter(
            PolicyMode.ENFORCING.policies_hook,
            partial(_add_static_policies, settings.content_security_policy),
        )
    if settings.report_only_content_security_policy:
        hooks.add_filter(
            PolicyMode.REPORT_ONLY.policies_hook,
            partial(_add_static_policies, settings.report_only_content_security_policy),
        )

    hasher = IntegrityHasher(
        cache,
        algorithm=settings.integrity_hash_algorithm,
        ttl=settings.integrity_cache_ttl,
        override=hash_override,
        post_process=hash_post_process,
    )
    logger.debug(
        "browser_security_bootstrapped",
        automatic_integrity=settings.automatic_integrity,
        cache=type(cache).__name__,
    )
    return BrowserSecurity(settings=settings, hooks=hooks, hasher=hasher)
