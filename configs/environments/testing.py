"""
Testing environment configuration.
"""

from datetime import timedelta

from pydantic_settings import SettingsConfigDict

from .base import BaseConfig


class TestingConfig(BaseConfig):
    """Testing configuration.

    Compressed windows and thresholds so that detection paths can be
    exercised quickly and deterministically.
    """

    __test__ = False  # not a pytest test class

    model_config = SettingsConfigDict(env_file=".env.testing")

    environment: str = "testing"
    debug: bool = True
    log_level: str = "DEBUG"
    log_format: str = "text"
    log_to_file: bool = False

    # Small history and thresholds
    max_history_size: int = 100
    critical_error_threshold: int = 3
    cascading_failure_min_error_types: int = 2
    cascading_failure_min_errors: int = 4
    system_health_error_threshold: int = 5
    max_health_score_errors: int = 10

    # Short windows
    error_window_duration: timedelta = timedelta(seconds=30)
    alert_cooldown: timedelta = timedelta(seconds=60)
    cascading_failure_window: timedelta = timedelta(seconds=15)
    health_check_window: timedelta = timedelta(seconds=30)
    stats_window_24h: timedelta = timedelta(hours=1)
    stats_window_1h: timedelta = timedelta(minutes=5)

    max_frequent_errors_to_show: int = 3

    # No host sampling in tests
    include_resource_usage: bool = False
