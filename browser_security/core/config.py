"""
Application configuration using Pydantic Settings.
All configuration is loaded from ABS_-prefixed environment variables with sensible defaults.
"""

import os
import re
from functools import lru_cache
from typing import Literal, Self

from pydantic import Field, RedisDsn, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

YEAR_IN_SECONDS = 365 * 24 * 60 * 60

# Directive names end up verbatim in a header line.
_DIRECTIVE_NAME_RE = re.compile(r"^[^\s;,]+$")

PolicyValue = str | list[str]


class Settings(BaseSettings):
    """
    Browser security settings loaded from environment variables.

    Flags decide which behaviours are wired at bootstrap; the static
    directive maps are merged into the collected policy sets on every request.
    """

    model_config = SettingsConfigDict(
        env_prefix="ABS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Core Application Settings
    # ==========================================================================
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    project_name: str = "Browser Security"
    version: str = "0.1.0"

    # ==========================================================================
    # Site Layout
    # ==========================================================================
    site_url: str = Field(
        default="http://localhost:8000/",
        description="Public base URL of the site; assets outside it are never hashed",
    )
    web_root: str = Field(
        default_factory=os.getcwd,
        description="Filesystem directory the site URL is served from",
    )
    root_dir: str | None = Field(
        default=None,
        description="Explicit platform root; preferred over web_root for non-core assets",
    )

    # ==========================================================================
    # Feature Flags
    # ==========================================================================
    automatic_integrity: bool = True
    nosniff_header: bool = True
    frame_options_header: bool = True
    xss_protection_header: bool = True

    # ==========================================================================
    # Content Security Policy
    # ==========================================================================
    content_security_policy: dict[str, PolicyValue] = Field(
        default_factory=dict,
        description="Directives added to the enforcing policy set",
    )
    report_only_content_security_policy: dict[str, PolicyValue] = Field(
        default_factory=dict,
        description="Directives added to the report-only policy set",
    )

    # ==========================================================================
    # Integrity Hash Cache
    # ==========================================================================
    redis_url: RedisDsn | None = Field(
        default=None,
        description="Redis used for the integrity hash cache; in-process cache when unset",
    )
    integrity_hash_algorithm: Literal["sha384", "sha512"] = "sha384"
    integrity_cache_ttl: int = Field(default=YEAR_IN_SECONDS, ge=1)

    @field_validator("site_url")
    @classmethod
    def _trailing_slash(cls, value: str) -> str:
        return value.rstrip("/") + "/"

    @model_validator(mode="after")
    def _validate_directive_names(self) -> Self:
        """Reject configured directive names that would corrupt the header."""
        for field_name in ("content_security_policy", "report_only_content_security_policy"):
            for directive in getattr(self, field_name):
                if not _DIRECTIVE_NAME_RE.fullmatch(directive):
                    raise ValueError(f"{field_name} has an invalid directive name: {directive!r}")
        return self


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Using lru_cache ensures settings are loaded once and reused,
    avoiding repeated environment variable parsing.
    """
    return Settings()
