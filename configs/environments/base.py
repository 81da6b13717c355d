"""
Base configuration settings.
"""

from datetime import timedelta
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration for all environments.

    Production defaults. Every field can be overridden through the
    environment (case-insensitive) or the profile's ``.env`` file.
    Durations accept seconds or ISO 8601 strings (``PT5M``).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Application
    app_name: str = "Revision Error Monitor"
    app_version: str = "1.0.0"
    environment: str = "production"
    debug: bool = False

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"
    log_dir: str = "logs"
    log_to_file: bool = True
    console_output: bool = True

    # History and thresholds
    max_history_size: int = Field(1000, gt=0)
    critical_error_threshold: int = Field(5, gt=0)
    cascading_failure_min_error_types: int = Field(3, gt=0)
    cascading_failure_min_errors: int = Field(8, gt=0)
    system_health_error_threshold: int = Field(10, gt=0)
    max_health_score_errors: int = Field(20, gt=0)
    health_alert_score_threshold: int = Field(50, ge=0, le=100)

    # Windows
    error_window_duration: timedelta = timedelta(minutes=5)
    alert_cooldown: timedelta = timedelta(minutes=15)
    cascading_failure_window: timedelta = timedelta(minutes=2)
    health_check_window: timedelta = timedelta(minutes=5)
    stats_window_24h: timedelta = timedelta(hours=24)
    stats_window_1h: timedelta = timedelta(hours=1)

    # Reporting
    max_frequent_errors_to_show: int = Field(5, gt=0)

    # Feature switches
    enable_real_time_alerting: bool = True
    enable_health_monitoring: bool = True
    include_resource_usage: bool = True

    def validate_thresholds(self) -> List[str]:
        """Report threshold combinations that make detection impossible."""
        issues = []

        windows = {
            'error_window_duration': self.error_window_duration,
            'alert_cooldown': self.alert_cooldown,
            'cascading_failure_window': self.cascading_failure_window,
            'health_check_window': self.health_check_window,
            'stats_window_24h': self.stats_window_24h,
            'stats_window_1h': self.stats_window_1h,
        }
        for name, window in windows.items():
            if window <= timedelta(0):
                issues.append(f"{name} must be positive")

        if self.critical_error_threshold > self.max_history_size:
            issues.append("critical_error_threshold exceeds max_history_size")

        if self.cascading_failure_min_errors > self.max_history_size:
            issues.append("cascading_failure_min_errors exceeds max_history_size")

        if self.cascading_failure_min_error_types > self.cascading_failure_min_errors:
            issues.append(
                "cascading_failure_min_error_types exceeds cascading_failure_min_errors"
            )

        if self.stats_window_1h > self.stats_window_24h:
            issues.append("stats_window_1h is longer than stats_window_24h")

        if self.log_format not in ("json", "text"):
            issues.append(f"Unsupported log_format: {self.log_format}")

        return issues
