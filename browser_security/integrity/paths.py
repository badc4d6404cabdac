"""
Map public asset URLs back to files under a trusted root.

Asset URLs are untrusted input: the relative part is rejected when it is
absolute or contains a ``../`` segment, before the filesystem is touched.
"""

from __future__ import annotations

import os
import re

from browser_security.integrity.errors import FileNotExistsError, InvalidPathError

# Present in the web root of a standard install.
INSTALLER_MARKER = "wp-config.php"

# Core platform files always live directly under the web root.
CORE_PATH_PREFIX = "wp-"

_DRIVE_RE = re.compile(r"^[A-Za-z]:[\\/]")


def is_absolute_path(path: str) -> bool:
    """True for POSIX roots, UNC/backslash roots, drive letters and stream wrappers."""
    if path.startswith(("/", "\\")):
        return True
    if _DRIVE_RE.match(path):
        return True
    return "://" in path


def has_traversal(path: str) -> bool:
    return "../" in path or "..\\" in path


def split_local_path(src: str, site_url: str) -> str | None:
    """Return *src* relative to *site_url* without its query, or None if not local."""
    base = site_url.rstrip("/") + "/"
    if not src.startswith(base):
        return None
    rel_path = src[len(base) :]
    rel_path, _, _query = rel_path.partition("?")
    return rel_path


def select_root(rel_path: str, web_root: str, root_dir: str | None = None) -> str:
    """Pick the directory *rel_path* is resolved against."""
    if root_dir:
        root = root_dir
    elif os.path.exists(os.path.join(web_root, INSTALLER_MARKER)):
        root = web_root
    else:
        root = os.path.dirname(os.path.normpath(web_root))

    if rel_path.startswith(CORE_PATH_PREFIX) and os.path.normpath(root) != os.path.normpath(
        web_root
    ):
        root = web_root
    return root


def resolve_asset_path(
    src: str,
    *,
    site_url: str,
    web_root: str,
    root_dir: str | None = None,
    handle: str | None = None,
) -> str | None:
    """Resolve an asset URL to an absolute file path.

    Returns None when the asset is not served from *site_url* (remote or
    CDN assets are skipped, not errors).

    Raises
    ------
    InvalidPathError
        The relative path is absolute or contains a traversal segment.
    FileNotExistsError
        The resolved file does not exist.
    """
    rel_path = split_local_path(src, site_url)
    if rel_path is None:
        return None

    if is_absolute_path(rel_path) or has_traversal(rel_path):
        raise InvalidPathError(f'Path "{src}" for {handle} is invalid', handle=handle, src=src)

    root = os.path.abspath(select_root(rel_path, web_root, root_dir))
    actual_path = os.path.normpath(os.path.join(root, rel_path))
    if os.path.commonpath([root, actual_path]) != root:
        raise InvalidPathError(f'Path "{src}" for {handle} is invalid', handle=handle, src=src)

    if not os.path.isfile(actual_path):
        raise FileNotExistsError(f"File for {handle} does not exist", handle=handle, src=src)

    return actual_path
