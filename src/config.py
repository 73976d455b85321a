"""Application configuration via pydantic-settings.

Secrets (AADE credentials) are loaded from environment variables (.env file).
Settings are organized into logical groups and composed into a single Settings object.
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseSettings):
    """HTTP listener settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=3000, description="Listening port (PORT)")


class RegistrySettings(BaseSettings):
    """AADE RgWsPublic2 registry service settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    aade_url: str = Field(
        default="https://www1.gsis.gr/wsaade/RgWsPublic2/RgWsPublic2",
        description="RgWsPublic2 SOAP endpoint",
    )
    aade_username: str = Field(default="", description="AADE special-access username")
    aade_password: str = Field(default="", description="AADE special-access password")
    aade_called_by: str = Field(
        default="",
        description="AFM on whose behalf the query is made (optional)",
    )
    aade_timeout: float = Field(default=15.0, description="Total deadline for one registry call, seconds")
    aade_active_marker: str = Field(
        default="ΕΝΕΡΓΟΣ ΑΦΜ",
        description="deactivation_flag_descr value the registry uses for active AFMs",
    )

    @field_validator("aade_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Reject non-positive timeouts."""
        if v <= 0:
            msg = f"Invalid AADE timeout: {v}. Must be greater than zero"
            raise ValueError(msg)
        return v

    @property
    def has_credentials(self) -> bool:
        """Both username and password are configured."""
        return bool(self.aade_username and self.aade_password)


class Settings(BaseSettings):
    """Root settings composing all sub-settings.

    Usage:
        settings = Settings()
        settings.server.port
        settings.registry.aade_username
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")
    verbose: bool = Field(
        default=False,
        description="Log registry envelopes and responses (password, name and postal fields masked)",
    )

    # Composed settings (loaded from same .env)
    server: ServerSettings = Field(default_factory=ServerSettings)
    registry: RegistrySettings = Field(default_factory=RegistrySettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid:
            msg = f"Invalid log level: {v}. Must be one of {valid}"
            raise ValueError(msg)
        return upper

    @property
    def effective_log_level(self) -> str:
        """Verbose mode forces DEBUG regardless of LOG_LEVEL."""
        return "DEBUG" if self.verbose else self.log_level

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


# Module-level singleton — import this wherever settings are needed.
settings = Settings()
