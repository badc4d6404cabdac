"""
Content-Security-Policy assembly and serialization.

A policy set is collected per request and mode, each directive value is
normalised into quoted tokens and filtered, and the non-empty directives are
joined into a single header. Enforcing and report-only sets are built
through independent hook chains.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

from browser_security.core.hooks import (
    HOOK_CONTENT_SECURITY_POLICIES,
    HOOK_FILTER_POLICY_VALUE,
    HOOK_FILTER_REPORT_ONLY_POLICY_VALUE,
    HOOK_REPORT_ONLY_CONTENT_SECURITY_POLICIES,
    HookRegistry,
)

BASELINE_DIRECTIVES: tuple[str, ...] = (
    "child-src",
    "font-src",
    "frame-src",
    "img-src",
    "media-src",
    "object-src",
    "script-src",
    "style-src",
)

KEYWORD_TOKENS = frozenset({"self", "unsafe-inline", "unsafe-eval", "none", "strict-dynamic"})
NONCE_PREFIX = "nonce-"


class PolicyMode(str, Enum):
    ENFORCING = "enforcing"
    REPORT_ONLY = "report-only"

    @property
    def header_name(self) -> str:
        if self is PolicyMode.REPORT_ONLY:
            return "Content-Security-Policy-Report-Only"
        return "Content-Security-Policy"

    @property
    def policies_hook(self) -> str:
        if self is PolicyMode.REPORT_ONLY:
            return HOOK_REPORT_ONLY_CONTENT_SECURITY_POLICIES
        return HOOK_CONTENT_SECURITY_POLICIES

    @property
    def value_hook(self) -> str:
        if self is PolicyMode.REPORT_ONLY:
            return HOOK_FILTER_REPORT_ONLY_POLICY_VALUE
        return HOOK_FILTER_POLICY_VALUE

    def directive_hook(self, directive: str) -> str:
        return f"{self.value_hook}.{directive}"


def baseline_policies() -> dict[str, Any]:
    return {directive: [] for directive in BASELINE_DIRECTIVES}


def collect_policies(hooks: HookRegistry, mode: PolicyMode) -> dict[str, Any]:
    """Build the raw policy set for *mode*.

    Collaborators receive the baseline mapping and return its replacement;
    values may be a single token or a list of tokens.
    """
    policies = hooks.apply_filters(mode.policies_hook, baseline_policies())
    return dict(policies)


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Iterable):
        return list(value)
    return [value]


def quote_token(token: str) -> str:
    """Wrap CSP keywords and nonces in single quotes; leave sources untouched."""
    if token in KEYWORD_TOKENS or token.startswith(NONCE_PREFIX):
        return f"'{token}'"
    return token


def normalize_policy_value(
    hooks: HookRegistry,
    directive: str,
    value: Any,
    mode: PolicyMode = PolicyMode.ENFORCING,
) -> list[str]:
    """Turn a raw directive value into the final token list.

    The directive-specific hook runs before the catch-all hook.
    """
    tokens = [quote_token(str(token)) for token in _as_list(value)]
    tokens = hooks.apply_filters(mode.directive_hook(directive), tokens)
    tokens = hooks.apply_filters(mode.value_hook, tokens, directive)
    return [str(token) for token in _as_list(tokens)]


def format_policy(
    hooks: HookRegistry,
    policies: Mapping[str, Any],
    mode: PolicyMode = PolicyMode.ENFORCING,
) -> str:
    """Serialize *policies* to a header value; empty string when nothing remains."""
    parts: list[str] = []
    for directive, value in policies.items():
        tokens = normalize_policy_value(hooks, directive, value, mode)
        if not tokens:
            continue
        parts.append(" ".join([directive, *tokens]))
    return "; ".join(parts)


def serialize_policy_header(
    hooks: HookRegistry,
    policies: Mapping[str, Any],
    mode: PolicyMode = PolicyMode.ENFORCING,
) -> str:
    """Return the full ``Name: value`` header line, or "" when the policy is empty."""
    value = format_policy(hooks, policies, mode)
    if not value:
        return ""
    return f"{mode.header_name}: {value}"


def get_policy_header(hooks: HookRegistry, mode: PolicyMode) -> tuple[str, str] | None:
    """Collect and serialize the policy for *mode* as a ``(name, value)`` pair."""
    value = format_policy(hooks, collect_policies(hooks, mode), mode)
    if not value:
        return None
    return mode.header_name, value


def merge_static_policies(
    policies: dict[str, Any], additions: Mapping[str, str | list[str]]
) -> dict[str, Any]:
    """Append configured directive values onto a collected policy set."""
    merged = dict(policies)
    for directive, value in additions.items():
        merged[directive] = _as_list(merged.get(directive)) + _as_list(value)
    return merged
