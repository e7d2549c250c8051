"""Configuration management for the objective progress service.

Settings are loaded from environment variables (or a .env file) with
defaults suitable for local development. The progress engine itself never
reads settings; services receive the values they need as arguments.
"""

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Server Configuration
    host: str = Field(
        default="0.0.0.0",
        description="Host to bind the server to",
        validation_alias=AliasChoices("PROGRESS_SERVER_HOST", "HOST"),
    )
    port: int = Field(
        default=8080,
        description="Port to run the server on",
        validation_alias=AliasChoices("PROGRESS_SERVER_PORT", "PORT"),
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
        validation_alias="LOG_LEVEL",
    )
    environment: str = Field(
        default="development",
        description="Environment name (development, staging, production)",
        validation_alias=AliasChoices("ENVIRONMENT", "ENV"),
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
        validation_alias="DEBUG",
    )

    # Snapshot Configuration
    snapshot_db_path: str = Field(
        default="objective_snapshots.db",
        description="Path to the objective snapshots SQLite database",
        validation_alias=AliasChoices("SNAPSHOT_DB_PATH", "DATABASE_PATH"),
    )
    snapshot_limit: int = Field(
        default=10,
        ge=1,
        description="Number of recent snapshots used for velocity",
        validation_alias="SNAPSHOT_LIMIT",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


def get_settings() -> Settings:
    """
    Get application settings.

    Loads settings from environment variables and .env file.

    Returns:
        Settings instance with all configuration values
    """
    return Settings()


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def settings() -> Settings:
    """
    Get the global settings instance.

    Creates the settings instance on first call and caches it.
    """
    global _settings
    if _settings is None:
        _settings = get_settings()
    return _settings
