"""Configuration management for the FinOps Org Insights MCP Server.

This module handles loading and validating configuration from environment
variables with sensible defaults.
"""

from typing import Optional
from pydantic import Field, AliasChoices
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults for local development.
    In production, these should be set via environment variables
    or a .env file.
    """

    # Server Configuration
    host: str = Field(
        default="0.0.0.0",
        description="Host to bind the server to",
        validation_alias=AliasChoices("MCP_SERVER_HOST", "HOST")
    )
    port: int = Field(
        default=8080,
        description="Port to run the server on",
        validation_alias=AliasChoices("MCP_SERVER_PORT", "PORT")
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
        validation_alias="LOG_LEVEL"
    )
    environment: str = Field(
        default="development",
        description="Environment name (development, staging, production)",
        validation_alias=AliasChoices("ENVIRONMENT", "ENV")
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
        validation_alias="DEBUG"
    )

    # Dataset Configuration
    dataset_path: Optional[str] = Field(
        default=None,
        description="Path to an organisation dataset JSON file (generated if not set)",
        validation_alias="DATASET_PATH"
    )
    dataset_seed: Optional[int] = Field(
        default=None,
        description="Seed for the synthetic dataset generator",
        validation_alias="DATASET_SEED"
    )

    # Rollup Configuration
    top_n: int = Field(
        default=5,
        ge=1,
        description="Number of entries kept by top-N rankings",
        validation_alias="TOP_N"
    )

    model_config = SettingsConfigDict(
        env_prefix="",  # No prefix for environment variables
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

    Returns:
        Global Settings instance
    """
    global _settings
    if _settings is None:
        _settings = get_settings()
    return _settings
