"""Configuration management for the application."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SslMode = Literal["disable", "allow", "prefer", "require", "verify-ca", "verify-full"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Modes that never fall back to a plaintext connection
ENCRYPTED_SSLMODES = ("require", "verify-ca", "verify-full")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Server
    host: str = Field(default="0.0.0.0")  # noqa: S104
    port: int = Field(default=3000)

    # Database
    database_url: str
    # "require" encrypts without verifying the server certificate
    database_sslmode: SslMode = Field(default="require")
    database_pool_size: int = Field(default=5, ge=1)
    database_max_overflow: int = Field(default=10, ge=0)
    database_connect_timeout: int = Field(default=10, ge=1)  # seconds
    database_statement_timeout_ms: int = Field(default=30000, ge=0)

    # API
    cors_origins: list[str] = Field(default=["*"])
    log_level: LogLevel = Field(default="INFO")
    environment: str = Field(default="development")

    @field_validator("database_url")
    @classmethod
    def normalize_database_url(cls, value: str) -> str:
        """Accept the legacy postgres:// scheme handed out by hosting providers."""
        if value.startswith("postgres://"):
            return "postgresql://" + value.removeprefix("postgres://")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> object:
        """Accept log level names in any case."""
        return value.upper() if isinstance(value, str) else value

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Validate that production has secure settings."""
        if self.is_production and self.database_sslmode not in ENCRYPTED_SSLMODES:
            raise ValueError(
                f"DATABASE_SSLMODE must be one of {', '.join(ENCRYPTED_SSLMODES)} in production"
            )
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
