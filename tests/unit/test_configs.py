"""
Unit tests for configuration profiles.
"""

import pytest
from datetime import timedelta

from pydantic import ValidationError

from configs import (
    BaseConfig, DevelopmentConfig, ProductionConfig, TestingConfig,
    get_config_class, get_settings, validate_settings
)


@pytest.fixture
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestProfiles:
    """Test profile values."""

    def test_production_defaults(self):
        config = ProductionConfig()

        assert config.max_history_size == 1000
        assert config.critical_error_threshold == 5
        assert config.cascading_failure_min_error_types == 3
        assert config.cascading_failure_min_errors == 8
        assert config.system_health_error_threshold == 10
        assert config.max_health_score_errors == 20
        assert config.error_window_duration == timedelta(minutes=5)
        assert config.alert_cooldown == timedelta(minutes=15)
        assert config.cascading_failure_window == timedelta(minutes=2)
        assert config.health_check_window == timedelta(minutes=5)
        assert config.stats_window_24h == timedelta(hours=24)
        assert config.stats_window_1h == timedelta(hours=1)
        assert config.max_frequent_errors_to_show == 5
        assert config.enable_real_time_alerting is True
        assert config.enable_health_monitoring is True

    def test_testing_profile(self):
        config = TestingConfig()

        assert config.max_history_size == 100
        assert config.critical_error_threshold == 3
        assert config.cascading_failure_min_error_types == 2
        assert config.cascading_failure_min_errors == 4
        assert config.system_health_error_threshold == 5
        assert config.max_health_score_errors == 10
        assert config.error_window_duration == timedelta(seconds=30)
        assert config.alert_cooldown == timedelta(seconds=60)
        assert config.cascading_failure_window == timedelta(seconds=15)
        assert config.health_check_window == timedelta(seconds=30)
        assert config.stats_window_24h == timedelta(hours=1)
        assert config.stats_window_1h == timedelta(minutes=5)
        assert config.max_frequent_errors_to_show == 3
        assert config.include_resource_usage is False

    def test_development_profile(self):
        config = DevelopmentConfig()

        assert config.debug is True
        assert config.log_level == "DEBUG"
        assert config.alert_cooldown == timedelta(minutes=2)

    def test_settings_are_frozen(self):
        config = TestingConfig()
        with pytest.raises(ValidationError):
            config.max_history_size = 5

    def test_thresholds_must_be_positive(self):
        with pytest.raises(ValidationError):
            TestingConfig(max_history_size=0)
        with pytest.raises(ValidationError):
            TestingConfig(critical_error_threshold=-1)


class TestEnvironmentOverrides:
    """Test environment variable overrides."""

    def test_env_overrides_field(self, monkeypatch):
        monkeypatch.setenv("CRITICAL_ERROR_THRESHOLD", "7")
        monkeypatch.setenv("ALERT_COOLDOWN", "PT2M")

        config = TestingConfig()
        assert config.critical_error_threshold == 7
        assert config.alert_cooldown == timedelta(minutes=2)

    @pytest.mark.parametrize("environment, expected", [
        ("production", ProductionConfig),
        ("development", DevelopmentConfig),
        ("testing", TestingConfig),
        ("test", TestingConfig),
        ("TESTING", TestingConfig),
        ("staging", ProductionConfig),
    ])
    def test_config_class_selection(self, monkeypatch, environment, expected):
        monkeypatch.setenv("ENVIRONMENT", environment)
        assert get_config_class() is expected

    def test_default_is_production(self, monkeypatch):
        monkeypatch.delenv("ENVIRONMENT", raising=False)
        assert get_config_class() is ProductionConfig

    def test_get_settings_is_cached(self, monkeypatch, clear_settings_cache):
        monkeypatch.setenv("ENVIRONMENT", "testing")

        settings = get_settings()
        assert isinstance(settings, TestingConfig)
        assert get_settings() is settings


class TestValidation:
    """Test threshold validation."""

    def test_valid_profiles(self):
        assert TestingConfig().validate_thresholds() == []
        assert ProductionConfig().validate_production_requirements() == []
        assert validate_settings(TestingConfig()) is True

    def test_inconsistent_thresholds(self):
        config = TestingConfig(max_history_size=2, cascading_failure_min_error_types=5)
        issues = config.validate_thresholds()

        assert "critical_error_threshold exceeds max_history_size" in issues
        assert "cascading_failure_min_errors exceeds max_history_size" in issues
        assert "cascading_failure_min_error_types exceeds cascading_failure_min_errors" in issues
        assert validate_settings(config) is False

    def test_non_positive_window(self):
        config = TestingConfig(error_window_duration=timedelta(0))
        assert "error_window_duration must be positive" in config.validate_thresholds()

    def test_stats_windows_order(self):
        config = TestingConfig(stats_window_1h=timedelta(hours=2))
        assert "stats_window_1h is longer than stats_window_24h" in config.validate_thresholds()

    def test_production_requirements(self):
        config = ProductionConfig(enable_health_monitoring=False, log_level="DEBUG")
        issues = config.validate_production_requirements()

        assert "Health monitoring should be enabled in production" in issues
        assert any("too verbose" in issue for issue in issues)

    def test_base_config_is_production_shaped(self, monkeypatch):
        monkeypatch.delenv("ENVIRONMENT", raising=False)
        assert BaseConfig().environment == "production"
