"""
Asset registries and integrity hash binding.

Hashes are stored against an asset handle in the registry's per-handle
metadata under ``INTEGRITY_DATA_KEY``. The binding is a projection of the
hash cache; the file contents remain the source of truth.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from html import escape
from typing import Any, Literal, Protocol

from browser_security.integrity.errors import (
    CouldNotGenerateHashError,
    CouldNotSetHashError,
    IntegrityError,
    InvalidAssetHandleError,
)
from browser_security.integrity.hashing import IntegrityHasher
from browser_security.integrity.paths import resolve_asset_path

INTEGRITY_DATA_KEY = "integrity_hash"

AssetKind = Literal["script", "style"]


@dataclass(slots=True)
class Asset:
    """A registered script or stylesheet."""

    handle: str
    src: str
    ver: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)


class AssetRegistry(Protocol):
    """Lookup and metadata operations of the host's asset registry."""

    kind: AssetKind

    def query(self, handle: str) -> Asset | None:
        """Return the registered asset, or None for an unknown handle."""
        ...

    def get_data(self, handle: str, key: str) -> Any:
        """Return metadata stored for *handle*, or None."""
        ...

    def add_data(self, handle: str, key: str, value: Any) -> bool:
        """Store metadata for *handle*; False when the handle is unknown."""
        ...


class DependencyRegistry:
    """In-memory asset registry for one asset kind."""

    def __init__(self, kind: AssetKind) -> None:
        self.kind = kind
        self._assets: dict[str, Asset] = {}

    def register(self, handle: str, src: str, ver: str | None = None) -> bool:
        if handle in self._assets:
            return False
        self._assets[handle] = Asset(handle=handle, src=src, ver=ver)
        return True

    def handles(self) -> list[str]:
        return list(self._assets)

    def query(self, handle: str) -> Asset | None:
        return self._assets.get(handle)

    def get_data(self, handle: str, key: str) -> Any:
        asset = self._assets.get(handle)
        if asset is None:
            return None
        return asset.extra.get(key)

    def add_data(self, handle: str, key: str, value: Any) -> bool:
        asset = self._assets.get(handle)
        if asset is None:
            return False
        asset.extra[key] = value
        return True

    def asset_url(self, asset: Asset) -> str:
        if not asset.ver:
            return asset.src
        separator = "&" if "?" in asset.src else "?"
        return f"{asset.src}{separator}ver={asset.ver}"

    def render_tag(self, handle: str) -> str:
        """Render the markup the platform emits for *handle*."""
        asset = self._assets.get(handle)
        if asset is None:
            raise InvalidAssetHandleError(f"Invalid asset handle {handle}", handle=handle)
        url = escape(self.asset_url(asset), quote=True)
        if self.kind == "script":
            return f"<script type='text/javascript' src='{url}'></script>\n"
        return (
            f"<link rel='stylesheet' id='{escape(handle, quote=True)}-css' "
            f"href='{url}' type='text/css' media='all' />\n"
        )


def get_hash_for_asset(registry: AssetRegistry, handle: str) -> str | None:
    value = registry.get_data(handle, INTEGRITY_DATA_KEY)
    return value or None


def set_hash_for_asset(registry: AssetRegistry, handle: str, hash_value: str) -> bool:
    return registry.add_data(handle, INTEGRITY_DATA_KEY, hash_value)


async def generate_hash_for_asset(
    registry: AssetRegistry,
    handle: str,
    *,
    hasher: IntegrityHasher,
    site_url: str,
    web_root: str,
    root_dir: str | None = None,
) -> IntegrityError | None:
    """Generate and bind the integrity hash for a registered asset.

    Failures are returned rather than raised so one bad asset never aborts
    rendering. Remote assets are skipped and return None, like successes.
    """
    try:
        asset = registry.query(handle)
        if asset is None:
            raise InvalidAssetHandleError(f"Invalid asset handle {handle}", handle=handle)

        path = resolve_asset_path(
            asset.src,
            site_url=site_url,
            web_root=web_root,
            root_dir=root_dir,
            handle=handle,
        )
        if path is None:
            return None

        try:
            hash_value = await hasher.generate_hash_for_path(path, asset.ver)
        except CouldNotGenerateHashError as exc:
            raise CouldNotGenerateHashError(
                f"Could not generate hash for {handle}", handle=handle, src=asset.src
            ) from exc
        if not hash_value:
            raise CouldNotGenerateHashError(
                f"Could not generate hash for {handle}", handle=handle, src=asset.src
            )

        if not set_hash_for_asset(registry, handle, hash_value):
            raise CouldNotSetHashError(
                f"Could not set hash for {handle}", handle=handle, src=asset.src
            )
    except IntegrityError as exc:
        return exc
    return None
