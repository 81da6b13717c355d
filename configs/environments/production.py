"""
Production environment configuration.
"""

from typing import List

from pydantic_settings import SettingsConfigDict

from .base import BaseConfig


class ProductionConfig(BaseConfig):
    """Production configuration."""

    model_config = SettingsConfigDict(env_file=".env.production")

    environment: str = "production"
    debug: bool = False
    log_level: str = "INFO"
    log_dir: str = "/var/log/revision"

    def validate_production_requirements(self) -> List[str]:
        """Additional validation for production."""
        issues = self.validate_thresholds()

        if not self.enable_real_time_alerting:
            issues.append("Real-time alerting should be enabled in production")

        if not self.enable_health_monitoring:
            issues.append("Health monitoring should be enabled in production")

        if self.log_level.upper() in ("TRACE", "DEBUG"):
            issues.append(f"log_level {self.log_level} is too verbose for production")

        return issues
