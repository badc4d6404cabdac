"""
Subresource Integrity hash generation.

Hashes are formatted ``<algo>-<base64 digest>`` and cached per
``(path, version)``. A cached hash may be stale until the version changes or
the entry expires; bump the asset version to force regeneration.
"""

from __future__ import annotations

import base64
import hashlib
from collections.abc import Callable

from browser_security.core.cache import CacheStore
from browser_security.core.config import YEAR_IN_SECONDS
from browser_security.core.logging import get_logger
from browser_security.integrity.errors import CouldNotGenerateHashError

logger = get_logger(__name__)

DEFAULT_ALGORITHM = "sha384"
SUPPORTED_ALGORITHMS = frozenset({"sha384", "sha512"})
CACHE_KEY_PREFIX = "integrity:"

# (path, version) -> hash; a truthy result skips generation entirely.
HashOverride = Callable[[str, str | None], str | None]
# (hash, path, version) -> hash
HashPostProcessor = Callable[[str, str, str | None], str]


def compute_integrity(data: bytes, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """Format the SRI value for *data*."""
    if algorithm not in SUPPORTED_ALGORITHMS:
        raise ValueError(f"Unsupported integrity algorithm: {algorithm}")
    digest = hashlib.new(algorithm, data).digest()
    return f"{algorithm}-{base64.b64encode(digest).decode('ascii')}"


def cache_key_for(path: str, version: str | None = None) -> str:
    # Not a security boundary; sha1 only keeps keys short.
    raw = f"{path}?{version or ''}"
    return CACHE_KEY_PREFIX + hashlib.sha1(raw.encode("utf-8")).hexdigest()


class IntegrityHasher:
    """Compute and cache integrity hashes for files on disk."""

    def __init__(
        self,
        cache: CacheStore,
        *,
        algorithm: str = DEFAULT_ALGORITHM,
        ttl: int = YEAR_IN_SECONDS,
        override: HashOverride | None = None,
        post_process: HashPostProcessor | None = None,
    ) -> None:
        if algorithm not in SUPPORTED_ALGORITHMS:
            raise ValueError(f"Unsupported integrity algorithm: {algorithm}")
        self.cache = cache
        self.algorithm = algorithm
        self.ttl = ttl
        self.override = override
        self.post_process = post_process

    async def generate_hash_for_path(self, path: str, version: str | None = None) -> str | None:
        """Return the integrity hash for the file at *path*.

        Parameters
        ----------
        path:
            Absolute path of an already validated file.
        version:
            Asset version, part of the cache key.

        Raises
        ------
        CouldNotGenerateHashError
            The file could not be read.
        """
        if self.override is not None:
            supplied = self.override(path, version)
            if supplied:
                return supplied

        key = cache_key_for(path, version)
        cached = await self._cache_get(key)
        if cached:
            return cached

        try:
            with open(path, "rb") as fh:
                data = fh.read()
        except OSError as exc:
            raise CouldNotGenerateHashError(f"Could not read {path}: {exc}", src=path) from exc

        value = compute_integrity(data, self.algorithm)
        if self.post_process is not None:
            value = self.post_process(value, path, version)

        if value:
            await self._cache_set(key, value)
        return value or None

    async def _cache_get(self, key: str) -> str | None:
        try:
            return await self.cache.get(key)
        except Exception:
            logger.warning("integrity_cache_get_failed", key=key, exc_info=True)
            return None

    async def _cache_set(self, key: str, value: str) -> None:
        try:
            await self.cache.set(key, value, self.ttl)
        except Exception:
            logger.warning("integrity_cache_set_failed", key=key, exc_info=True)
