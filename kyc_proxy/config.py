"""
Configuration module for the KYC Proxy.

This module uses Pydantic Settings to load and validate environment variables
for the Airtable credential, the upstream table location, HTTP timeouts,
CORS and server settings.

Environment variables are loaded from .env file or system environment.
"""

import re
from functools import lru_cache
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_AIRTABLE_ID_PATTERN = re.compile(r"[A-Za-z0-9]+")


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    The Airtable token is the only required value; the process must not
    start serving without it.
    """

    # =========================================================================
    # Airtable Configuration
    # =========================================================================

    AIRTABLE_API_TOKEN: str = Field(
        ...,
        description="Airtable personal access token injected as a Bearer credential",
        validation_alias=AliasChoices("AIRTABLE_API_TOKEN", "AIRTABLE_API_KEY"),
        min_length=1,
    )

    AIRTABLE_BASE_ID: str = Field(
        default="appc0ZVhbKj8hMLvH",
        description="Airtable base holding the KYC table",
        min_length=1,
    )

    AIRTABLE_TABLE_ID: str = Field(
        default="tblIxT2t2gHoZMucn",
        description="Airtable table holding the KYC records",
        min_length=1,
    )

    AIRTABLE_API_URL: str = Field(
        default="https://api.airtable.com/v0",
        description="Airtable REST API root",
        min_length=1,
    )

    # =========================================================================
    # Upstream HTTP Configuration
    # =========================================================================

    UPSTREAM_TIMEOUT_SECONDS: float = Field(
        default=30.0,
        description="Total timeout for a single upstream request",
        gt=0,
    )

    UPSTREAM_CONNECT_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        description="Connect timeout for upstream requests",
        gt=0,
    )

    # =========================================================================
    # KYC Lookup Configuration
    # =========================================================================

    KYC_MAX_RECORDS: int = Field(
        default=5,
        description="maxRecords sent with account status lookups",
        ge=1,
        le=100,
    )

    KYC_VIEW: str = Field(
        default="Grid view",
        description="Airtable view used for account status lookups",
        min_length=1,
    )

    # =========================================================================
    # Server Configuration
    # =========================================================================

    PROXY_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the proxy server",
    )

    PROXY_PORT: int = Field(
        default=8000,
        description="Port to bind the proxy server",
        ge=1,
        le=65535,
    )

    ALLOWED_ORIGINS: Optional[str] = Field(
        None,
        description="Comma-separated list of allowed CORS origins (empty allows any origin)",
    )

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
        frozen=True,
    )

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def allowed_origins_list(self) -> List[str]:
        """
        Parse ALLOWED_ORIGINS into a list.

        Returns:
            List of origins, or ["*"] when nothing is configured.
        """
        if not self.ALLOWED_ORIGINS:
            return ["*"]

        origins = [
            origin.strip()
            for origin in self.ALLOWED_ORIGINS.split(",")
            if origin.strip()
        ]
        return origins or ["*"]

    @property
    def airtable_table_url(self) -> str:
        """Full list-records URL of the KYC table."""
        return f"{self.AIRTABLE_API_URL}/{self.AIRTABLE_BASE_ID}/{self.AIRTABLE_TABLE_ID}"

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("AIRTABLE_API_TOKEN")
    @classmethod
    def validate_api_token(cls, v: str) -> str:
        """
        Strip the token and reject blank or whitespace-containing values.

        Raises:
            ValueError: If the token cannot be used in a Bearer header
        """
        v = v.strip()
        if not v:
            raise ValueError("AIRTABLE_API_TOKEN must not be blank")
        if any(ch.isspace() for ch in v):
            raise ValueError("AIRTABLE_API_TOKEN must not contain whitespace")
        return v

    @field_validator("AIRTABLE_BASE_ID", "AIRTABLE_TABLE_ID")
    @classmethod
    def validate_airtable_id(cls, v: str) -> str:
        v = v.strip()
        if not _AIRTABLE_ID_PATTERN.fullmatch(v):
            raise ValueError(
                f"Invalid Airtable identifier: '{v}'. "
                "Expected letters and digits only"
            )
        return v

    @field_validator("AIRTABLE_API_URL")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"AIRTABLE_API_URL must be an http(s) URL, got: {v}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.strip().upper()
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v not in allowed_levels:
            raise ValueError(f"LOG_LEVEL must be one of {allowed_levels}, got: {v}")
        return v


# =============================================================================
# Settings Singleton
# =============================================================================

@lru_cache()
def get_settings() -> Settings:
    """
    Get or create a singleton Settings instance.

    This function is cached so that the credential is read only once
    during the application lifecycle.

    Returns:
        Settings instance with all configuration loaded and validated.

    Raises:
        ValidationError: If AIRTABLE_API_TOKEN is missing or any value
                         is invalid.
    """
    return Settings()


# =============================================================================
# Configuration Helpers
# =============================================================================

def validate_configuration(settings: Settings) -> Dict[str, Any]:
    """
    Report non-fatal configuration warnings.

    Fatal problems are already rejected by Settings validation; this
    covers values that load fine but look wrong for production.

    Returns:
        Dictionary with the warnings and a few non-sensitive values.

    Example:
        >>> report = validate_configuration(get_settings())
        >>> for warning in report["warnings"]:
        ...     print(warning)
    """
    warnings = []

    if not settings.AIRTABLE_API_URL.startswith("https://"):
        warnings.append("AIRTABLE_API_URL is not HTTPS; the credential is sent in clear text")

    if len(settings.AIRTABLE_API_TOKEN) < 16:
        warnings.append("AIRTABLE_API_TOKEN is shorter than any token Airtable issues")

    if settings.allowed_origins_list == ["*"]:
        warnings.append("ALLOWED_ORIGINS is not set; CORS allows any origin")

    return {
        "warnings": warnings,
        "table_url": settings.airtable_table_url,
        "log_level": settings.LOG_LEVEL,
    }

