"""
Centralized settings management using pydantic-settings.

All environment variables and configuration values are defined here.
Use get_settings() to access the singleton settings instance.
"""

import os
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Optional environment variables:
        - SUPABASE_URL: Supabase project URL
        - SUPABASE_SERVICE_KEY: Supabase service role key
        - ENVIRONMENT: Environment name (development, staging, production)
        - LOG_LEVEL: Minimum log level (default: INFO)
        - JSON_LOGS: Emit JSON logs instead of console output

    The personalization and scoring engines are pure and never need the
    database, so the Supabase credentials are optional here.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Environment
    # ==========================================================================
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def is_development(self) -> bool:
        return self.environment.lower() in ("development", "dev", "local")

    @property
    def is_production(self) -> bool:
        return self.environment.lower() in ("production", "prod")

    # ==========================================================================
    # Logging
    # ==========================================================================
    log_level: str = Field(default="INFO", description="Minimum log level")
    json_logs: bool = Field(default=False, description="Render logs as JSON")

    @field_validator("log_level", mode="before")
    @classmethod
    def parse_log_level(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v

    # ==========================================================================
    # Supabase Configuration
    # ==========================================================================
    supabase_url: str = Field(default="", description="Supabase project URL")
    supabase_service_key: str = Field(default="", description="Supabase service role key")

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_service_key)

    sessions_table: str = Field(
        default="meditation_sessions",
        description="Table holding meditation session content"
    )
    courses_table: str = Field(default="courses", description="Table holding courses")
    user_progress_table: str = Field(
        default="user_progress",
        description="Table holding per-user session progress"
    )

    # ==========================================================================
    # Cultural Adaptation
    # ==========================================================================
    max_active_adaptations: int = Field(
        default=5,
        ge=1,
        description="Maximum adaptation rules active at once"
    )
    adaptation_history_size: int = Field(
        default=10,
        ge=1,
        description="Adaptation change events kept in memory"
    )

    # ==========================================================================
    # Recommendations
    # ==========================================================================
    default_recommendation_limit: int = Field(
        default=10,
        ge=1,
        description="Default number of recommendations returned"
    )
    time_based_recommendation_limit: int = Field(default=5, ge=1)
    course_recommendation_limit: int = Field(default=5, ge=1)
    user_timezone: str = Field(
        default="Asia/Jakarta",
        description="IANA zone used to bucket completion times (WIB)"
    )

    # ==========================================================================
    # Progressive Onboarding
    # ==========================================================================
    after_value_min_sessions: int = Field(
        default=1,
        ge=0,
        description="Completed sessions before cultural questions are asked"
    )
    progressive_min_sessions: int = Field(
        default=3,
        ge=0,
        description="Completed sessions before behavioral questions are asked"
    )
    optional_min_sessions: int = Field(
        default=10,
        ge=0,
        description="Completed sessions before advanced questions are asked"
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Uses lru_cache to ensure only one instance is created.
    Settings are loaded from environment variables and .env file.

    Returns:
        Settings: The application settings instance

    Raises:
        ValidationError: If an environment variable has an invalid value
    """
    # Try to find .env file in project root
    env_file = Path(__file__).parent.parent.parent / ".env"
    if env_file.exists():
        os.environ.setdefault("ENV_FILE", str(env_file))

    return Settings(_env_file=env_file if env_file.exists() else None)


def get_settings_for_testing(**overrides) -> Settings:
    """
    Create a settings instance for testing with optional overrides.

    This bypasses the cache to allow different settings in tests.

    Args:
        **overrides: Setting values to override

    Returns:
        Settings: A new settings instance with overrides applied
    """
    test_defaults = {
        "supabase_url": "https://test.supabase.co",
        "supabase_service_key": "test-key",
        "environment": "testing",
        "debug": True,
    }
    test_defaults.update(overrides)

    return Settings(_env_file=None, **test_defaults)
