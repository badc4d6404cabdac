"""Content-Security-Policy assembly and the CORS origin guard."""

from browser_security.policy.cors import CorsOriginDenied, allow_origin, restrict_cors_origin
from browser_security.policy.csp import (
    BASELINE_DIRECTIVES,
    KEYWORD_TOKENS,
    PolicyMode,
    collect_policies,
    format_policy,
    get_policy_header,
    normalize_policy_value,
    serialize_policy_header,
)

__all__ = [
    "CorsOriginDenied",
    "allow_origin",
    "restrict_cors_origin",
    "BASELINE_DIRECTIVES",
    "KEYWORD_TOKENS",
    "PolicyMode",
    "collect_policies",
    "format_policy",
    "get_policy_header",
    "normalize_policy_value",
    "serialize_policy_header",
]
