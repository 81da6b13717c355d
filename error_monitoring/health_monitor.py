"""
System health analysis.

Turns a window of recent error events into a health score, a healthy /
unhealthy verdict, cascading-failure detection and pattern breakdowns.
The monitor keeps no state of its own; every result is computed from the
events it is handed.
"""

from typing import Dict, Optional, Any, Callable, Sequence
from datetime import datetime, timedelta
from dataclasses import dataclass, field
from enum import Enum
import math

from .error_enums import ErrorCategory, ErrorSeverity
from .error_event import ErrorEvent
from .resources import ResourceUsage


MAX_HEALTH_SCORE = 100
MIN_HEALTH_SCORE = 0

SEVERITY_PENALTIES: Dict[ErrorSeverity, int] = {
    ErrorSeverity.CRITICAL: 20,
    ErrorSeverity.HIGH: 10,
    ErrorSeverity.MEDIUM: 5,
    ErrorSeverity.LOW: 1,
    ErrorSeverity.UNKNOWN: 3,
}


@dataclass(frozen=True)
class CascadingFailureAnalysis:
    """Result of cascading failure analysis."""
    is_cascading_failure: bool
    unique_error_types: int
    total_errors: int
    time_window: timedelta
    error_distribution: Dict[ErrorCategory, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'detected': self.is_cascading_failure,
            'unique_error_types': self.unique_error_types,
            'total_errors': self.total_errors,
            'time_window_seconds': self.time_window.total_seconds(),
            'error_distribution': {
                category.value: share for category, share in self.error_distribution.items()
            },
        }


@dataclass(frozen=True)
class ErrorPatternAnalysis:
    """Frequency breakdown of a set of error events."""
    total_errors: int
    errors_by_category: Dict[ErrorCategory, int]
    errors_by_severity: Dict[ErrorSeverity, int]
    errors_by_type: Dict[str, int]
    dominant_category: ErrorCategory
    dominant_severity: ErrorSeverity
    time_span: timedelta

    @classmethod
    def empty(cls) -> 'ErrorPatternAnalysis':
        return cls(
            total_errors=0,
            errors_by_category={},
            errors_by_severity={},
            errors_by_type={},
            dominant_category=ErrorCategory.UNKNOWN,
            dominant_severity=ErrorSeverity.UNKNOWN,
            time_span=timedelta(0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_errors': self.total_errors,
            'errors_by_category': {k.value: v for k, v in self.errors_by_category.items()},
            'errors_by_severity': {k.value: v for k, v in self.errors_by_severity.items()},
            'errors_by_type': dict(self.errors_by_type),
            'dominant_category': self.dominant_category.value,
            'dominant_severity': self.dominant_severity.value,
            'time_span_seconds': self.time_span.total_seconds(),
        }


@dataclass(frozen=True)
class SystemHealthReport:
    """Health report for a window of recent errors."""
    health_score: int
    is_healthy: bool
    has_active_alerts: bool
    cascading_failure_analysis: CascadingFailureAnalysis
    error_pattern_analysis: ErrorPatternAnalysis
    timestamp: datetime
    resource_usage: Optional[ResourceUsage] = None

    def to_dict(self) -> Dict[str, Any]:
        report = {
            'health_score': self.health_score,
            'is_healthy': self.is_healthy,
            'has_active_alerts': self.has_active_alerts,
            'cascading_failure': {
                'detected': self.cascading_failure_analysis.is_cascading_failure,
                'unique_error_types': self.cascading_failure_analysis.unique_error_types,
                'total_errors': self.cascading_failure_analysis.total_errors,
            },
            'error_patterns': {
                'total_errors': self.error_pattern_analysis.total_errors,
                'dominant_category': self.error_pattern_analysis.dominant_category.value,
                'dominant_severity': self.error_pattern_analysis.dominant_severity.value,
            },
            'timestamp': self.timestamp.isoformat(),
        }

        if self.resource_usage is not None:
            report['resource_usage'] = self.resource_usage.to_dict()

        return report


def _dominant(counts: Dict[Enum, int], members) -> Any:
    """Most frequent member; ties go to the earlier declared member."""
    best = None
    best_count = 0
    for member in members:
        count = counts.get(member, 0)
        if count > best_count:
            best, best_count = member, count
    return best


class SystemHealthMonitor:
    """Scores and analyses error events."""

    def __init__(
        self,
        max_health_score_errors: int = 20,
        system_health_error_threshold: int = 10,
        cascading_failure_min_error_types: int = 3,
        cascading_failure_min_errors: int = 8,
        cascading_failure_window: timedelta = timedelta(minutes=2),
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.max_health_score_errors = max_health_score_errors
        self.system_health_error_threshold = system_health_error_threshold
        self.cascading_failure_min_error_types = cascading_failure_min_error_types
        self.cascading_failure_min_errors = cascading_failure_min_errors
        self.cascading_failure_window = cascading_failure_window
        self._clock = clock or datetime.now

    @classmethod
    def from_config(cls, config: Any, clock: Optional[Callable[[], datetime]] = None) -> 'SystemHealthMonitor':
        return cls(
            max_health_score_errors=config.max_health_score_errors,
            system_health_error_threshold=config.system_health_error_threshold,
            cascading_failure_min_error_types=config.cascading_failure_min_error_types,
            cascading_failure_min_errors=config.cascading_failure_min_errors,
            cascading_failure_window=config.cascading_failure_window,
            clock=clock,
        )

    def calculate_health_score(self, recent_errors: Sequence[ErrorEvent]) -> int:
        """
        Calculate system health score (0-100).

        The base score falls linearly with the error count and reaches zero
        at ``max_health_score_errors``; each event then subtracts a
        severity penalty.
        """
        if not recent_errors:
            return MAX_HEALTH_SCORE

        max_errors = self.max_health_score_errors
        error_count = min(len(recent_errors), max_errors)
        # Round half up
        base_score = math.floor((max_errors - error_count) * 100 / max_errors + 0.5)

        penalty = sum(SEVERITY_PENALTIES[event.severity] for event in recent_errors)

        return max(MIN_HEALTH_SCORE, min(MAX_HEALTH_SCORE, base_score - penalty))

    def is_system_healthy(self, recent_errors: Sequence[ErrorEvent], has_active_alerts: bool) -> bool:
        """Check if the system is in a healthy state."""
        if has_active_alerts:
            return False

        if any(event.severity == ErrorSeverity.CRITICAL for event in recent_errors):
            return False

        return len(recent_errors) < self.system_health_error_threshold

    def analyze_cascading_failures(self, recent_errors: Sequence[ErrorEvent]) -> CascadingFailureAnalysis:
        """Detect many distinct errors piling up together."""
        unique_error_types = len({event.error_key for event in recent_errors})
        total_errors = len(recent_errors)

        is_cascading = (
            unique_error_types >= self.cascading_failure_min_error_types
            and total_errors >= self.cascading_failure_min_errors
        )

        return CascadingFailureAnalysis(
            is_cascading_failure=is_cascading,
            unique_error_types=unique_error_types,
            total_errors=total_errors,
            time_window=self.cascading_failure_window,
            error_distribution=self._calculate_error_distribution(recent_errors),
        )

    def analyze_error_patterns(self, errors: Sequence[ErrorEvent]) -> ErrorPatternAnalysis:
        """Analyze error frequencies by category, severity and key."""
        if not errors:
            return ErrorPatternAnalysis.empty()

        errors_by_category: Dict[ErrorCategory, int] = {}
        errors_by_severity: Dict[ErrorSeverity, int] = {}
        errors_by_type: Dict[str, int] = {}

        for event in errors:
            errors_by_category[event.category] = errors_by_category.get(event.category, 0) + 1
            errors_by_severity[event.severity] = errors_by_severity.get(event.severity, 0) + 1
            errors_by_type[event.error_key] = errors_by_type.get(event.error_key, 0) + 1

        timestamps = [event.timestamp for event in errors]

        return ErrorPatternAnalysis(
            total_errors=len(errors),
            errors_by_category=errors_by_category,
            errors_by_severity=errors_by_severity,
            errors_by_type=errors_by_type,
            dominant_category=_dominant(errors_by_category, ErrorCategory),
            dominant_severity=_dominant(errors_by_severity, ErrorSeverity),
            time_span=max(timestamps) - min(timestamps),
        )

    def generate_health_report(
        self,
        recent_errors: Sequence[ErrorEvent],
        has_active_alerts: bool,
        resource_usage: Optional[ResourceUsage] = None
    ) -> SystemHealthReport:
        """Build a full health report."""
        return SystemHealthReport(
            health_score=self.calculate_health_score(recent_errors),
            is_healthy=self.is_system_healthy(recent_errors, has_active_alerts),
            has_active_alerts=has_active_alerts,
            cascading_failure_analysis=self.analyze_cascading_failures(recent_errors),
            error_pattern_analysis=self.analyze_error_patterns(recent_errors),
            timestamp=self._clock(),
            resource_usage=resource_usage,
        )

    def _calculate_error_distribution(self, errors: Sequence[ErrorEvent]) -> Dict[ErrorCategory, float]:
        if not errors:
            return {}

        counts: Dict[ErrorCategory, int] = {}
        for event in errors:
            counts[event.category] = counts.get(event.category, 0) + 1

        return {category: count / len(errors) for category, count in counts.items()}
