"""
Core configuration module for header-session.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the HEADER_SESSION_ prefix.
Nested connection fields use a double underscore, e.g. HEADER_SESSION_CONNECTION__HOST.

Settings are frozen: once a SessionSettings instance is built it is shared by the
store, the identifier generator and the session manager without being mutated.

Pattern: Pydantic BaseSettings with a cached singleton accessor
"""

from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_SID_HEADER = "Session-Id"


class ConnectionSettings(BaseModel):
    """Redis endpoint used as the session store."""

    model_config = {"frozen": True}

    host: str = Field(
        default="127.0.0.1",
        description="Redis host",
    )
    port: int = Field(
        default=6379,
        ge=1,
        le=65535,
        description="Redis port",
    )
    db: Optional[int] = Field(
        default=None,
        ge=0,
        description="Redis logical database index",
    )
    username: Optional[str] = Field(
        default=None,
        description="Redis ACL username",
    )
    # SecretStr masks the value in logs/repr, use .get_secret_value() to access
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Redis password",
    )


class SessionSettings(BaseSettings):
    """
    Session settings loaded from environment variables.

    All fields use the HEADER_SESSION_ prefix for environment variables.
    Example: HEADER_SESSION_TTL=120
    """

    # =========================================================================
    # Session Lifecycle
    # =========================================================================
    ttl: int = Field(
        default=600,
        ge=1,
        description="Session time-to-live in seconds (ignored when persist is set)",
    )
    persist: bool = Field(
        default=False,
        description="Sessions never expire by time; only explicit deletion removes them",
    )
    sid_length: int = Field(
        default=40,
        ge=1,
        le=1024,
        description="Number of characters in a session identifier",
    )
    sid_header: str = Field(
        default=DEFAULT_SID_HEADER,
        min_length=1,
        description="HTTP header carrying the session identifier",
    )
    key_prefix: str = Field(
        default="session:",
        description="Redis key namespace reserved for session records",
    )

    # =========================================================================
    # Debug and Administration
    # =========================================================================
    debug: bool = Field(
        default=False,
        description="Verbose session logging",
    )
    allow_admin_operations: Optional[bool] = Field(
        default=None,
        description="Allow destroy_all/get_all_keys; follows debug when unset",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level used when debug is disabled",
    )

    # =========================================================================
    # Redis Connection
    # =========================================================================
    connection: ConnectionSettings = Field(default_factory=ConnectionSettings)

    model_config = SettingsConfigDict(
        env_prefix="HEADER_SESSION_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # =========================================================================
    # Field Validators
    # =========================================================================
    @field_validator("sid_header")
    @classmethod
    def validate_sid_header(cls, v: str) -> str:
        """Reject header names HTTP cannot carry."""
        v = v.strip()
        if not v or any(ch in v for ch in " \t\r\n:"):
            raise ValueError("sid_header must be a valid HTTP header name")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level value."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {valid_levels}")
        return v.upper()

    @model_validator(mode="after")
    def default_admin_to_debug(self) -> "SessionSettings":
        """Admin operations follow the debug flag unless set explicitly."""
        if self.allow_admin_operations is None:
            # frozen model: bypass __setattr__ during validation
            object.__setattr__(self, "allow_admin_operations", self.debug)
        return self

    @property
    def effective_log_level(self) -> str:
        """DEBUG when debug is on, otherwise the configured level."""
        return "DEBUG" if self.debug else self.log_level


# =============================================================================
# Settings Singleton
# =============================================================================


@lru_cache
def get_settings() -> SessionSettings:
    """
    Get the application settings singleton.

    Uses functools.lru_cache to ensure only one SessionSettings instance is created.

    Returns:
        SessionSettings: The application settings instance.
    """
    return SessionSettings()
