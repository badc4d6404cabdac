"""Insert ``integrity`` attributes into rendered asset tags."""

from __future__ import annotations

from html import escape

SCRIPT_MARKER = "type='text/javascript' src='"
STYLE_MARKER = " type='text/css'"


def output_integrity_for_script(tag: str, hash_value: str | None) -> str:
    if not hash_value:
        return tag
    return tag.replace(
        SCRIPT_MARKER,
        f"type='text/javascript' integrity='{escape(hash_value, quote=True)}' src='",
    )


def output_integrity_for_style(html: str, hash_value: str | None) -> str:
    if not hash_value:
        return html
    return html.replace(
        STYLE_MARKER,
        f" type='text/css' integrity='{escape(hash_value, quote=True)}'",
    )
