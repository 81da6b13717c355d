"""
Development environment configuration.
"""

from datetime import timedelta

from pydantic_settings import SettingsConfigDict

from .base import BaseConfig


class DevelopmentConfig(BaseConfig):
    """Development configuration."""

    model_config = SettingsConfigDict(env_file=".env.development")

    environment: str = "development"
    debug: bool = True
    log_level: str = "DEBUG"
    log_format: str = "text"

    # Shorter cooldown so alerts re-arm while iterating locally
    alert_cooldown: timedelta = timedelta(minutes=2)
