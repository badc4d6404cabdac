"""Errors raised while generating and binding integrity hashes."""

from __future__ import annotations


class IntegrityError(ValueError):
    """Base class for per-asset integrity failures.

    ``code`` is stable and suitable for log aggregation; ``handle`` and
    ``src`` identify the asset when known.
    """

    code = "integrity_error"

    def __init__(self, message: str, *, handle: str | None = None, src: str | None = None) -> None:
        super().__init__(message)
        self.handle = handle
        self.src = src


class InvalidAssetHandleError(IntegrityError):
    code = "invalid_asset_handle"


class InvalidPathError(IntegrityError):
    """Asset URL maps to an absolute path or attempts directory traversal."""

    code = "invalid_path"


class FileNotExistsError(IntegrityError):
    code = "file_not_exists"


class CouldNotGenerateHashError(IntegrityError):
    code = "could_not_generate_hash"


class CouldNotSetHashError(IntegrityError):
    code = "could_not_set_hash"
