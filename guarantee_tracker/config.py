"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class TrackerConfig(BaseSettings):
    """Guarantee tracker configuration"""

    model_config = SettingsConfigDict(
        env_prefix="TRACKER_",
        env_file=".env",
        case_sensitive=False,
    )

    # Database configuration
    database_url: str = "sqlite:///guarantee_tracker.db"  # memory://, sqlite:///path, postgresql://...

    # API configuration
    api_host: str = "0.0.0.0"
    api_port: int = 5000
    cors_origins: List[str] = ["*"]

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text
    log_file: Optional[str] = None  # If None, logs to stdout

    # Reference data
    seed_default_currencies: bool = True
    default_currency: str = "TRY"


# Global configuration instance
config = TrackerConfig()


def get_config() -> TrackerConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> TrackerConfig:
    """Reload configuration from environment"""
    global config
    config = TrackerConfig()
    return config
