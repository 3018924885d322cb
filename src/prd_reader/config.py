# ABOUTME: Application configuration using Pydantic Settings for environment variables
# ABOUTME: Provides type-safe access to platform credentials, rendering defaults and logging config

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Application configuration with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="PRD_READER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore unknown environment variables
    )

    # Platform credentials
    confluence_username: str = Field(default="", description="Confluence account used for basic auth")
    confluence_token: str = Field(default="", description="Confluence API token")
    notion_token: str = Field(default="", description="Notion integration token")
    google_credentials: str = Field(default="", description="Google service account credentials as a JSON string")

    # Summarization
    anthropic_api_key: str = Field(default="", description="Anthropic API key used for document summaries")
    summary_model: str = Field(
        default="anthropic/claude-3-haiku-20240307", description="Language model identifier for summaries"
    )
    summary_max_tokens: int = Field(default=1000, description="Maximum tokens generated per summary")

    # Rendering and upstream defaults
    default_callout_emoji: str = Field(default="💡", description="Emoji used for Notion callouts without an icon")
    notion_version: str = Field(default="2022-06-28", description="Notion-Version header sent to the Notion API")
    request_timeout: float = Field(default=30.0, description="Timeout in seconds for upstream API requests")

    # Logging Configuration
    log_mode: Literal["interactive", "production"] = Field(default="interactive", description="Logging output mode")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging verbosity level"
    )

    log_file: Path | None = Field(default=None, description="Custom log file path (overrides default)")


# Global config instance - lazy loaded when first accessed
_config_instance: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance.

    Creates the config on first access, subsequent calls return the same instance.

    Returns:
        Config: The application configuration instance
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = Config()
    return _config_instance


def reload_config() -> Config:
    """Reload configuration from environment variables.

    Useful for testing or when environment variables change at runtime.

    Returns:
        Config: A fresh configuration instance
    """
    global _config_instance
    _config_instance = Config()
    return _config_instance
