"""
Named extension points.

A ``HookRegistry`` holds an ordered list of callbacks per hook name. Values
are threaded through the callbacks in registration order, each receiving
the current value plus any extra arguments and returning the new value.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

FilterCallback = Callable[..., Any]

# Policy set hooks receive the baseline mapping and return a replacement.
HOOK_CONTENT_SECURITY_POLICIES = "content_security_policies"
HOOK_REPORT_ONLY_CONTENT_SECURITY_POLICIES = "report_only_content_security_policies"

# Value hooks; the directive name is appended after a dot for directive-specific hooks.
HOOK_FILTER_POLICY_VALUE = "filter_policy_value"
HOOK_FILTER_REPORT_ONLY_POLICY_VALUE = "filter_report_only_policy_value"

HOOK_CORS_ALLOW_ORIGIN = "cors_allow_origin"


class HookRegistry:
    """Ordered filter chains keyed by hook name."""

    def __init__(self) -> None:
        self._filters: dict[str, list[FilterCallback]] = {}

    def add_filter(self, name: str, callback: FilterCallback) -> None:
        self._filters.setdefault(name, []).append(callback)

    def remove_filter(self, name: str, callback: FilterCallback) -> bool:
        """Remove the first registration of *callback*; False if it was not registered."""
        callbacks = self._filters.get(name)
        if not callbacks or callback not in callbacks:
            return False
        callbacks.remove(callback)
        if not callbacks:
            del self._filters[name]
        return True

    def has_filter(self, name: str, callback: FilterCallback | None = None) -> bool:
        callbacks = self._filters.get(name, [])
        if callback is None:
            return bool(callbacks)
        return callback in callbacks

    def apply_filters(self, name: str, value: Any, *args: Any) -> Any:
        """Pass *value* through every callback registered for *name*.

        Exceptions raised by callbacks propagate to the caller.
        """
        # Copy so a callback may (un)register hooks without skipping siblings.
        for callback in list(self._filters.get(name, ())):
            value = callback(value, *args)
        return value
