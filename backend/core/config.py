"""
Configuration management for the order lifecycle backend.

Settings are read from environment variables (or a local .env file) so that
deployments can point at a real database without code changes.
"""

from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """
    Application settings with environment variable support.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False,
        extra="ignore",
    )

    # Database Configuration
    database_url: str = "sqlite:///./orders.db"
    log_sql_queries: bool = False

    # Environment Settings
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # API (comma separated)
    cors_origins: str = "http://localhost:3000"

    # Order numbering: ORD-001, ORD-002, ...
    order_number_prefix: str = "ORD"
    order_number_width: int = 3

    # When enabled, status changes that move an order backwards (or out of
    # a terminal status) are rejected instead of being applied.
    strict_status_transitions: bool = False

    # Kitchen display sound cues
    sound_notifications_enabled: bool = True
    sound_cue_queue_size: int = 50

    @field_validator("order_number_width")
    @classmethod
    def validate_order_number_width(cls, v):
        if v < 1:
            raise ValueError("order_number_width must be at least 1")
        return v

    @property
    def cors_origin_list(self) -> List[str]:
        """Parse CORS origins from the comma separated setting."""
        return [
            origin.strip() for origin in self.cors_origins.split(",")
            if origin.strip()
        ]

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Returns:
        Settings instance with environment variables loaded
    """
    return Settings()


# Export settings instance for easy import
settings = get_settings()
