"""
Cross-origin request guard.

The guard holds no allow-list of its own: the decision is whatever the
``cors_allow_origin`` hook chain returns, starting from the default.
"""

from __future__ import annotations

from dataclasses import dataclass

from browser_security.core.hooks import HOOK_CORS_ALLOW_ORIGIN, HookRegistry


@dataclass(frozen=True, slots=True)
class CorsOriginDenied:
    """Denial returned for a disallowed request origin."""

    origin: str
    code: str = "cors_origin_not_allowed"
    status_code: int = 403

    @property
    def reason(self) -> str:
        return f"Origin {self.origin} is not allowed"


def allow_origin(hooks: HookRegistry, default: bool, origin: str) -> bool:
    return bool(hooks.apply_filters(HOOK_CORS_ALLOW_ORIGIN, default, origin))


def restrict_cors_origin(
    hooks: HookRegistry, origin: str | None, default: bool = True
) -> CorsOriginDenied | None:
    """Return a denial when *origin* is rejected, None when the request may proceed.

    Same-origin requests carry no Origin header and are never filtered.
    """
    if not origin:
        return None
    if allow_origin(hooks, default, origin):
        return None
    return CorsOriginDenied(origin=origin)
