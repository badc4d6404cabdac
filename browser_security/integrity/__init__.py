"""
Subresource Integrity support.

- **paths**: map asset URLs to files under a trusted root
- **hashing**: cached ``<algo>-<base64>`` hash generation
- **assets**: asset registries and per-handle hash binding
- **tags**: ``integrity`` attribute insertion
"""

from browser_security.integrity.assets import (
    INTEGRITY_DATA_KEY,
    Asset,
    AssetRegistry,
    DependencyRegistry,
    generate_hash_for_asset,
    get_hash_for_asset,
    set_hash_for_asset,
)
from browser_security.integrity.errors import (
    CouldNotGenerateHashError,
    CouldNotSetHashError,
    FileNotExistsError,
    IntegrityError,
    InvalidAssetHandleError,
    InvalidPathError,
)
from browser_security.integrity.hashing import IntegrityHasher, compute_integrity
from browser_security.integrity.paths import resolve_asset_path
from browser_security.integrity.tags import output_integrity_for_script, output_integrity_for_style

__all__ = [
    "INTEGRITY_DATA_KEY",
    "Asset",
    "AssetRegistry",
    "DependencyRegistry",
    "generate_hash_for_asset",
    "get_hash_for_asset",
    "set_hash_for_asset",
    "IntegrityError",
    "InvalidAssetHandleError",
    "InvalidPathError",
    "FileNotExistsError",
    "CouldNotGenerateHashError",
    "CouldNotSetHashError",
    "IntegrityHasher",
    "compute_integrity",
    "resolve_asset_path",
    "output_integrity_for_script",
    "output_integrity_for_style",
]
