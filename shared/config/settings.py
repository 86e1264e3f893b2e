"""
Library settings loaded from environment variables.
Uses pydantic-settings for type-safe configuration.
"""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings

LogLevel = Literal["", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Persistence settings with defaults for development."""

    # Database
    database_url: str = "sqlite:///./persistence.db"
    # Log every emitted statement through SQLAlchemy's engine logger
    sql_echo: bool = False

    # Repositories
    # Initial hydration mode for new repositories (False = scalar rows)
    repository_hydrate_default: bool = True

    # Environment
    environment: str = "development"
    debug: bool = True
    log_level: LogLevel = ""  # Empty = DEBUG when debug else INFO

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value):
        return value.strip().upper() if isinstance(value, str) else value

    def validate_production_settings(self) -> list[str]:
        """
        Validate settings that must differ from defaults in production.
        Returns a list of validation errors. Empty list means all checks pass.
        """
        errors = []

        if self.environment == "production":
            if self.debug:
                errors.append("DEBUG must be False in production")

            if self.database_url.startswith("sqlite"):
                errors.append("DATABASE_URL must point to a server database in production")

            if self.sql_echo:
                errors.append("SQL_ECHO must be False in production")

        return errors


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience exports
settings = get_settings()
