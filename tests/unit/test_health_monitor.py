"""
Unit tests for system health analysis.
"""

import pytest
from datetime import datetime, timedelta

from error_monitoring import (
    SystemHealthMonitor, ErrorPatternAnalysis, ErrorEvent,
    ErrorCategory, ErrorSeverity, ResourceUsage
)

BASE_TIME = datetime(2026, 1, 15, 12, 0, 0)


def make_event(
    key: str = "NetworkException:no_code",
    category: ErrorCategory = ErrorCategory.NETWORK,
    severity: ErrorSeverity = ErrorSeverity.MEDIUM,
    offset_seconds: int = 0,
) -> ErrorEvent:
    return ErrorEvent(
        error=RuntimeError(key),
        stack_trace="",
        context=f"ctx-{offset_seconds}",
        timestamp=BASE_TIME + timedelta(seconds=offset_seconds),
        category=category,
        severity=severity,
        is_user_recoverable=False,
        error_key=key,
    )


@pytest.fixture
def health_monitor() -> SystemHealthMonitor:
    """Monitor with the production thresholds."""
    return SystemHealthMonitor(clock=lambda: BASE_TIME)


class TestHealthScore:
    """Test health score calculation."""

    def test_empty_is_perfect(self, health_monitor):
        assert health_monitor.calculate_health_score([]) == 100

    def test_single_low_error(self, health_monitor):
        # base 95, penalty 1
        events = [make_event(severity=ErrorSeverity.LOW)]
        assert health_monitor.calculate_health_score(events) == 94

    @pytest.mark.parametrize("severity, expected", [
        (ErrorSeverity.CRITICAL, 75),
        (ErrorSeverity.HIGH, 85),
        (ErrorSeverity.MEDIUM, 90),
        (ErrorSeverity.LOW, 94),
        (ErrorSeverity.UNKNOWN, 92),
    ])
    def test_severity_penalties(self, health_monitor, severity, expected):
        assert health_monitor.calculate_health_score([make_event(severity=severity)]) == expected

    def test_critical_scores_below_low(self, health_monitor):
        critical = health_monitor.calculate_health_score([make_event(severity=ErrorSeverity.CRITICAL)])
        low = health_monitor.calculate_health_score([make_event(severity=ErrorSeverity.LOW)])
        assert critical < low

    def test_five_critical_errors_floor_at_zero(self, health_monitor):
        # base 50, penalty 100
        events = [make_event(severity=ErrorSeverity.CRITICAL, offset_seconds=i) for i in range(5)]
        assert health_monitor.calculate_health_score(events) == 0

    def test_clamped_at_zero(self, health_monitor):
        events = [make_event(severity=ErrorSeverity.CRITICAL, offset_seconds=i) for i in range(30)]
        assert health_monitor.calculate_health_score(events) == 0

    def test_score_always_in_range(self, health_monitor):
        for count in range(0, 25):
            events = [make_event(severity=ErrorSeverity.LOW, offset_seconds=i) for i in range(count)]
            score = health_monitor.calculate_health_score(events)
            assert 0 <= score <= 100

    def test_base_rounds_half_up(self):
        health_monitor = SystemHealthMonitor(max_health_score_errors=8)
        # (8 - 3) / 8 * 100 = 62.5 -> 63, minus 3 low penalties
        events = [make_event(severity=ErrorSeverity.LOW, offset_seconds=i) for i in range(3)]
        assert health_monitor.calculate_health_score(events) == 60


class TestSystemHealthy:
    """Test the healthy verdict."""

    def test_no_errors_no_alerts(self, health_monitor):
        assert health_monitor.is_system_healthy([], False) is True

    def test_active_alerts_make_unhealthy(self, health_monitor):
        assert health_monitor.is_system_healthy([], True) is False

    def test_any_critical_makes_unhealthy(self, health_monitor):
        events = [make_event(severity=ErrorSeverity.CRITICAL)]
        assert health_monitor.is_system_healthy(events, False) is False

    def test_error_count_threshold(self, health_monitor):
        events = [make_event(offset_seconds=i) for i in range(9)]
        assert health_monitor.is_system_healthy(events, False) is True

        events.append(make_event(offset_seconds=9))
        assert health_monitor.is_system_healthy(events, False) is False


class TestCascadingFailures:
    """Test cascading failure detection."""

    def test_requires_both_conditions(self, health_monitor):
        # Many errors, one type
        events = [make_event(offset_seconds=i) for i in range(10)]
        assert health_monitor.analyze_cascading_failures(events).is_cascading_failure is False

        # Many types, few errors
        events = [make_event(key=f"E{i}", offset_seconds=i) for i in range(5)]
        assert health_monitor.analyze_cascading_failures(events).is_cascading_failure is False

    def test_detected_at_thresholds(self, health_monitor):
        keys = ["A", "B", "C", "A", "B", "C", "A", "B"]
        events = [make_event(key=key, offset_seconds=i) for i, key in enumerate(keys)]

        analysis = health_monitor.analyze_cascading_failures(events)
        assert analysis.is_cascading_failure is True
        assert analysis.unique_error_types == 3
        assert analysis.total_errors == 8
        assert analysis.time_window == timedelta(minutes=2)

    def test_below_thresholds_on_each_axis(self, health_monitor):
        # Three types but one error short
        keys = ["A", "B", "C", "A", "B", "C", "A"]
        events = [make_event(key=key, offset_seconds=i) for i, key in enumerate(keys)]
        assert health_monitor.analyze_cascading_failures(events).is_cascading_failure is False

        # Eight errors but one type short
        keys = ["A", "B"] * 4
        events = [make_event(key=key, offset_seconds=i) for i, key in enumerate(keys)]
        assert health_monitor.analyze_cascading_failures(events).is_cascading_failure is False

    def test_error_distribution_sums_to_one(self, health_monitor):
        events = [
            make_event(key="A", category=ErrorCategory.NETWORK),
            make_event(key="B", category=ErrorCategory.STORAGE, offset_seconds=1),
            make_event(key="C", category=ErrorCategory.STORAGE, offset_seconds=2),
            make_event(key="D", category=ErrorCategory.VALIDATION, offset_seconds=3),
        ]

        distribution = health_monitor.analyze_cascading_failures(events).error_distribution
        assert distribution[ErrorCategory.STORAGE] == pytest.approx(0.5)
        assert sum(distribution.values()) == pytest.approx(1.0)

    def test_empty_distribution(self, health_monitor):
        analysis = health_monitor.analyze_cascading_failures([])
        assert analysis.error_distribution == {}
        assert analysis.to_dict()['detected'] is False


class TestErrorPatterns:
    """Test pattern analysis."""

    def test_empty_returns_zero_value(self, health_monitor):
        assert health_monitor.analyze_error_patterns([]) == ErrorPatternAnalysis.empty()

        empty = ErrorPatternAnalysis.empty()
        assert empty.dominant_category == ErrorCategory.UNKNOWN
        assert empty.dominant_severity == ErrorSeverity.UNKNOWN
        assert empty.time_span == timedelta(0)

    def test_frequency_tables(self, health_monitor):
        events = [
            make_event(key="A", category=ErrorCategory.STORAGE, severity=ErrorSeverity.CRITICAL),
            make_event(key="A", category=ErrorCategory.STORAGE, severity=ErrorSeverity.CRITICAL, offset_seconds=10),
            make_event(key="B", category=ErrorCategory.NETWORK, severity=ErrorSeverity.MEDIUM, offset_seconds=40),
        ]

        analysis = health_monitor.analyze_error_patterns(events)
        assert analysis.total_errors == 3
        assert analysis.errors_by_category == {ErrorCategory.STORAGE: 2, ErrorCategory.NETWORK: 1}
        assert analysis.errors_by_severity == {ErrorSeverity.CRITICAL: 2, ErrorSeverity.MEDIUM: 1}
        assert analysis.errors_by_type == {"A": 2, "B": 1}
        assert analysis.dominant_category == ErrorCategory.STORAGE
        assert analysis.dominant_severity == ErrorSeverity.CRITICAL
        assert analysis.time_span == timedelta(seconds=40)

    def test_tie_break_uses_declaration_order(self, health_monitor):
        """Test ties resolve to the earlier declared member regardless of arrival order."""
        events = [
            make_event(key="S", category=ErrorCategory.STORAGE, severity=ErrorSeverity.HIGH),
            make_event(key="N", category=ErrorCategory.NETWORK, severity=ErrorSeverity.LOW, offset_seconds=1),
        ]

        analysis = health_monitor.analyze_error_patterns(events)
        assert analysis.dominant_category == ErrorCategory.NETWORK
        assert analysis.dominant_severity == ErrorSeverity.LOW

    def test_time_span_ignores_order(self, health_monitor):
        events = [make_event(offset_seconds=30), make_event(offset_seconds=0), make_event(offset_seconds=10)]
        assert health_monitor.analyze_error_patterns(events).time_span == timedelta(seconds=30)


class TestHealthReport:
    """Test report generation."""

    def test_report_to_dict(self, health_monitor):
        events = [make_event(severity=ErrorSeverity.LOW)]

        report = health_monitor.generate_health_report(events, has_active_alerts=False)
        data = report.to_dict()

        assert data == {
            'health_score': 94,
            'is_healthy': True,
            'has_active_alerts': False,
            'cascading_failure': {
                'detected': False,
                'unique_error_types': 1,
                'total_errors': 1,
            },
            'error_patterns': {
                'total_errors': 1,
                'dominant_category': 'network',
                'dominant_severity': 'low',
            },
            'timestamp': BASE_TIME.isoformat(),
        }

    def test_report_with_resource_usage(self, health_monitor):
        usage = ResourceUsage(
            process_memory_mb=120.456,
            process_cpu_percent=3.5,
            thread_count=7,
            system_memory_percent=41.0,
            captured_at=BASE_TIME
        )

        report = health_monitor.generate_health_report([], False, resource_usage=usage)
        data = report.to_dict()

        assert data['resource_usage']['process_memory_mb'] == 120.46
        assert data['resource_usage']['thread_count'] == 7


def test_from_config(testing_config):
    health_monitor = SystemHealthMonitor.from_config(testing_config)

    assert health_monitor.max_health_score_errors == 10
    assert health_monitor.system_health_error_threshold == 5
    assert health_monitor.cascading_failure_min_error_types == 2
    assert health_monitor.cascading_failure_min_errors == 4
    assert health_monitor.cascading_failure_window == timedelta(seconds=15)
