"""
Configuration management for the Günce Defteri application.

Supports multiple environments (development, testing, production) with
environment-specific settings and a choice of storage backend.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

STORAGE_MODES = ("local", "remote")
SUPPORTED_LOCALES = ("tr", "en")


class BaseConfig(BaseSettings):
    """Base configuration with common settings for all environments."""

    # Application
    APP_NAME: str = "Günce Defteri"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = Field(default="development", description="Environment: development, testing, production")
    DEBUG: bool = Field(default=False, description="Debug mode")

    # API Server
    API_HOST: str = Field(default="127.0.0.1", description="API server host")
    API_PORT: int = Field(default=3001, description="API server port")
    CORS_ORIGINS: str = Field(default="http://localhost:3000,http://localhost:5173", description="CORS allowed origins (comma-separated)")

    # Storage
    STORAGE_MODE: str = Field(default="local", description="Storage backend: local (desktop) or remote (web)")
    LOCAL_DATABASE_URL: str = Field(default="sqlite+aiosqlite:///./gunce.db", description="Local embedded database URL")
    DATABASE_ECHO: bool = Field(default=False, description="Echo SQL queries")

    # Supabase (remote store)
    SUPABASE_URL: str = Field(default="", description="Supabase project URL")
    SUPABASE_ANON_KEY: str = Field(default="", description="Supabase anon/service key")
    SUPABASE_TABLE_ENTRIES: str = Field(default="diary_entries", description="Remote entries table")
    SUPABASE_TABLE_TAGS: str = Field(default="diary_tags", description="Remote tags table")
    SUPABASE_TIMEOUT: float = Field(default=10.0, description="Remote request timeout in seconds")

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL")
    LOG_FORMAT: str = Field(default="json", description="Log format: json or text")
    LOG_DIR: str = Field(default="logs", description="Directory for log files")

    # Security
    SECRET_KEY: str = Field(default="change-me-in-production", description="Secret used to sign access tokens")
    ALGORITHM: str = Field(default="HS256", description="Access token signing algorithm")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=60, description="Access token lifetime in minutes")
    MAX_PASSWORD_ATTEMPTS: int = Field(default=3, description="Failed unlock attempts allowed before lockout")
    ARGON2_MEMORY_COST: int = Field(default=65536, description="Argon2 memory cost in KiB for password hashes")
    ARGON2_TIME_COST: int = Field(default=3, description="Argon2 iterations for password hashes")
    ARGON2_PARALLELISM: int = Field(default=1, description="Argon2 lanes for password hashes")

    # User settings / display
    SETTINGS_FILE: str = Field(default="gunce-settings.json", description="Path of the persisted user settings file")
    DISPLAY_LOCALE: str = Field(default="tr", description="Locale used for weekday names: tr or en")

    # Reconciliation
    AUTO_SYNC: bool = Field(default=False, description="Reconcile with the remote store after local mutations")

    # Sentiment
    SENTIMENT_MODEL: str = Field(default="nlptown/bert-base-multilingual-uncased-sentiment", description="Sentiment model name")
    SENTIMENT_AUTO_TAG: bool = Field(default=False, description="Tag new entries with sentiment when none is supplied")

    @field_validator("STORAGE_MODE")
    @classmethod
    def validate_storage_mode(cls, value: str) -> str:
        value = value.lower()
        if value not in STORAGE_MODES:
            raise ValueError(f"STORAGE_MODE must be one of {STORAGE_MODES}")
        return value

    @field_validator("DISPLAY_LOCALE")
    @classmethod
    def validate_locale(cls, value: str) -> str:
        value = value.lower()
        if value not in SUPPORTED_LOCALES:
            raise ValueError(f"DISPLAY_LOCALE must be one of {SUPPORTED_LOCALES}")
        return value

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def remote_configured(self) -> bool:
        """Whether enough Supabase settings are present to reach the remote store."""
        return bool(self.SUPABASE_URL and self.SUPABASE_ANON_KEY)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


class DevelopmentConfig(BaseConfig):
    """Development environment configuration."""

    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "DEBUG"
    LOG_FORMAT: str = "text"


class TestingConfig(BaseConfig):
    """Testing environment configuration."""

    ENVIRONMENT: str = "testing"
    DEBUG: bool = False
    LOG_LEVEL: str = "WARNING"
    DATABASE_ECHO: bool = False
    LOCAL_DATABASE_URL: str = "sqlite+aiosqlite:///:memory:"
    # Reduced Argon2 cost for password hashes in tests
    ARGON2_MEMORY_COST: int = 1024
    ARGON2_TIME_COST: int = 1


class ProductionConfig(BaseConfig):
    """Production environment configuration."""

    ENVIRONMENT: str = "production"
    DEBUG: bool = False
    LOG_LEVEL: str = "ERROR"
    DATABASE_ECHO: bool = False


def get_config() -> BaseConfig:
    """
    Get configuration based on ENVIRONMENT variable.

    Returns:
        BaseConfig: Configuration object for the current environment
    """
    import os

    environment = os.getenv("ENVIRONMENT", "development").lower()

    config_map = {
        "development": DevelopmentConfig,
        "testing": TestingConfig,
        "production": ProductionConfig,
    }

    config_class = config_map.get(environment, DevelopmentConfig)
    return config_class()


# Global configuration instance
config = get_config()
