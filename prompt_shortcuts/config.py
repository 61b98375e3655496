"""Application configuration using pydantic-settings.

Provides a centralized Settings class for all environment variables. Only
the factory helpers (``get_repository``, ``get_service``) and
``configure_logging`` read it; the command classes take their options as
constructor parameters.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from prompt_shortcuts.utils.logging import configure_structured_logging


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings are loaded from .env file and environment variables.
    Environment variables take precedence over .env file values.
    """

    # Command storage
    commands_db_path: str = "data/commands.db"

    # Character that marks a shortcut invocation
    command_prefix: str = "/"

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
        case_sensitive=False,  # Allow case-insensitive env var names
    )


# Singleton instance - import this in your code
settings = Settings()


def configure_logging(config: Settings = settings) -> None:
    """Set up root logging from settings."""
    configure_structured_logging(config.log_level.upper(), config.log_json)
