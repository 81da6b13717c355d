"""
Error monitor: records errors, detects degradation patterns and reports
on system health.

The monitor is an ordinary object built from explicit dependencies
(settings, log sink, clock). A process-wide instance is available through
``initialize_error_monitor()`` / ``get_error_monitor()`` for code that has
no other way to reach it.
"""

from typing import Dict, List, Optional, Any, Callable, Mapping
from collections import deque
from datetime import datetime, timedelta
from dataclasses import dataclass, field
from enum import Enum
import functools
import inspect
import threading
import traceback
import types

from .alert_manager import AlertManager
from .error_classifier import ErrorClassifier
from .error_enums import ErrorCategory, ErrorSeverity
from .error_event import ErrorEvent
from .exceptions import HealthMonitoringDisabledError, MonitorNotInitializedError
from .health_monitor import SystemHealthMonitor, SystemHealthReport
from .logging_integration import EnhancedMonitoringLogger, MonitoringLogger
from .resources import capture_resource_usage
from configs.environments.base import BaseConfig
from configs.settings import get_settings
from utils.logging import get_enhanced_logger, get_logger, LogCategory

logger = get_logger(__name__)


class MonitorState(Enum):
    """Lifecycle states of an error monitor."""
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    DISPOSED = "disposed"


@dataclass(frozen=True)
class ErrorStatistics:
    """Error statistics snapshot."""
    total_errors_24h: int
    total_errors_1h: int
    errors_by_category: Dict[ErrorCategory, int]
    unique_error_types: int
    most_frequent_errors: List[Dict[str, Any]]
    alert_stats: Dict[str, Any]
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_errors_24h': self.total_errors_24h,
            'total_errors_1h': self.total_errors_1h,
            'errors_by_category': {k.value: v for k, v in self.errors_by_category.items()},
            'unique_error_types': self.unique_error_types,
            'most_frequent_errors': self.most_frequent_errors,
            'alert_stats': self.alert_stats,
            'timestamp': self.timestamp.isoformat(),
        }


def _format_stack_trace(error: Any, stack_trace: Any) -> str:
    """Normalise whatever the caller passed as a stack trace to text."""
    if isinstance(stack_trace, str):
        return stack_trace

    if isinstance(stack_trace, types.TracebackType):
        return ''.join(traceback.format_tb(stack_trace))

    if isinstance(stack_trace, traceback.StackSummary):
        return ''.join(stack_trace.format())

    if stack_trace is not None:
        # Opaque trace objects are kept as text
        return str(stack_trace)

    if isinstance(error, BaseException) and error.__traceback__ is not None:
        return ''.join(traceback.format_exception(type(error), error, error.__traceback__))

    # Not raised; record where it was reported from
    return ''.join(traceback.format_stack()[:-2])


class ErrorMonitor:
    """Records errors and raises alerts on critical patterns."""

    def __init__(
        self,
        config: Optional[BaseConfig] = None,
        logger: Optional[MonitoringLogger] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.config = config or get_settings()
        self._logger = logger or EnhancedMonitoringLogger()
        self._clock = clock or datetime.now

        self._classifier = ErrorClassifier()
        self._health_monitor = SystemHealthMonitor.from_config(self.config, clock=self._clock)
        self._alert_manager: Optional[AlertManager] = None

        self._error_history: deque = deque(maxlen=self.config.max_history_size)
        self._error_counts: Dict[str, int] = {}
        self._last_error_times: Dict[str, datetime] = {}

        self._state = MonitorState.UNINITIALIZED
        self._lock = threading.RLock()

        # Used when the configured sink itself fails
        self._fallback_logger = get_enhanced_logger(__name__, LogCategory.SYSTEM)

    @property
    def state(self) -> MonitorState:
        return self._state

    @property
    def is_initialized(self) -> bool:
        return self._state == MonitorState.INITIALIZED

    @property
    def alert_manager(self) -> AlertManager:
        self._ensure_initialized()
        return self._alert_manager

    @property
    def classifier(self) -> ErrorClassifier:
        return self._classifier

    @property
    def health_monitor(self) -> SystemHealthMonitor:
        return self._health_monitor

    def initialize(self) -> 'ErrorMonitor':
        """Arm the monitor. Re-initializing after dispose starts from a clean state."""
        with self._lock:
            if self._state == MonitorState.INITIALIZED:
                return self

            self._clear_history()
            self._alert_manager = AlertManager.from_config(self.config, self._logger, clock=self._clock)
            self._state = MonitorState.INITIALIZED

            self._logger.info(
                'Error monitor initialized',
                operation='MONITOR_INITIALIZED',
                context={
                    'environment': self.config.environment,
                    'max_history_size': self.config.max_history_size,
                    'real_time_alerting': self.config.enable_real_time_alerting,
                    'health_monitoring': self.config.enable_health_monitoring,
                }
            )
            return self

    def record_error(
        self,
        error: Any,
        context: str,
        stack_trace: Any = None,
        metadata: Optional[Mapping[str, Any]] = None
    ) -> Optional[ErrorEvent]:
        """
        Record an error and run real-time pattern detection.

        Args:
            error: Any error object; exceptions are the usual case
            context: Where the error happened (operation or screen name)
            stack_trace: Text, traceback or StackSummary; captured when omitted
            metadata: Extra fields attached to the event and its log entry

        Returns:
            The recorded event, or None if recording failed

        Raises:
            MonitorNotInitializedError: If the monitor is not initialized
        """
        with self._lock:
            self._ensure_initialized()

            event = None
            try:
                event = self._create_error_event(error, context, stack_trace, metadata or {})

                self._add_to_history(event)
                self._update_error_counts(event)

                if self.config.enable_real_time_alerting:
                    self._check_for_critical_patterns(event)

                self._log_error_event(event)

            except Exception as e:
                self._log_recording_failure(e, context)

            return event

    def get_error_statistics(self) -> ErrorStatistics:
        """Get error statistics over the configured windows."""
        with self._lock:
            self._ensure_initialized()

            errors_24h = self._get_recent_errors(self.config.stats_window_24h)
            errors_1h = self._get_recent_errors(self.config.stats_window_1h)

            errors_by_category: Dict[ErrorCategory, int] = {}
            for event in errors_24h:
                errors_by_category[event.category] = errors_by_category.get(event.category, 0) + 1

            return ErrorStatistics(
                total_errors_24h=len(errors_24h),
                total_errors_1h=len(errors_1h),
                errors_by_category=errors_by_category,
                unique_error_types=len(self._error_counts),
                most_frequent_errors=self._get_most_frequent_errors(),
                alert_stats=self._alert_manager.get_alert_stats(),
                timestamp=self._clock(),
            )

    def get_health_report(self) -> SystemHealthReport:
        """
        Get a health report over the health check window.

        Raises:
            HealthMonitoringDisabledError: If health monitoring is disabled
        """
        with self._lock:
            self._ensure_initialized()

            if not self.config.enable_health_monitoring:
                raise HealthMonitoringDisabledError()

            recent_errors = self._get_recent_errors(self.config.health_check_window)
            has_active_alerts = self._alert_manager.has_active_alerts

        resource_usage = capture_resource_usage() if self.config.include_resource_usage else None

        return self._health_monitor.generate_health_report(
            recent_errors,
            has_active_alerts,
            resource_usage=resource_usage,
        )

    def is_system_healthy(self) -> bool:
        """Check if the system is healthy. Always True when health monitoring is off."""
        with self._lock:
            self._ensure_initialized()

            if not self.config.enable_health_monitoring:
                return True

            recent_errors = self._get_recent_errors(self.config.health_check_window)
            return self._health_monitor.is_system_healthy(
                recent_errors,
                self._alert_manager.has_active_alerts,
            )

    def get_health_score(self) -> int:
        """Get health score (0-100). Always 100 when health monitoring is off."""
        with self._lock:
            self._ensure_initialized()

            if not self.config.enable_health_monitoring:
                return 100

            recent_errors = self._get_recent_errors(self.config.stats_window_1h)
            return self._health_monitor.calculate_health_score(recent_errors)

    def get_recent_errors(
        self,
        window: Optional[timedelta] = None,
        severity: Optional[ErrorSeverity] = None,
        category: Optional[ErrorCategory] = None
    ) -> List[ErrorEvent]:
        """Get recorded errors with optional filtering, newest first."""
        with self._lock:
            self._ensure_initialized()

            if window is None:
                events = list(self._error_history)
            else:
                events = self._get_recent_errors(window)

            if severity:
                events = [e for e in events if e.severity == severity]

            if category:
                events = [e for e in events if e.category == category]

            events.reverse()
            return events

    def reset(self) -> None:
        """Clear history, counters and alerts."""
        with self._lock:
            self._ensure_initialized()

            self._clear_history()
            self._alert_manager.reset_all_alerts()

            self._logger.info('Error monitoring state reset', operation='MONITOR_RESET')

    def dispose(self) -> None:
        """Release timers and state. Safe to call more than once."""
        with self._lock:
            if self._state == MonitorState.DISPOSED:
                return

            if self._alert_manager is not None:
                self._alert_manager.dispose()

            self._clear_history()
            self._state = MonitorState.DISPOSED

            self._logger.info('Error monitor disposed', operation='MONITOR_DISPOSED')

    # Private methods

    def _ensure_initialized(self) -> None:
        if self._state != MonitorState.INITIALIZED:
            raise MonitorNotInitializedError()

    def _clear_history(self) -> None:
        self._error_history.clear()
        self._error_counts.clear()
        self._last_error_times.clear()

    def _create_error_event(
        self,
        error: Any,
        context: str,
        stack_trace: Any,
        metadata: Mapping[str, Any]
    ) -> ErrorEvent:
        return ErrorEvent(
            error=error,
            stack_trace=_format_stack_trace(error, stack_trace),
            context=context,
            timestamp=self._clock(),
            metadata=metadata,
            category=self._classifier.categorize_error(error),
            severity=self._classifier.get_error_severity(error),
            is_user_recoverable=self._classifier.is_user_recoverable(error),
            error_key=self._classifier.generate_error_key(error),
        )

    def _add_to_history(self, event: ErrorEvent) -> None:
        # deque(maxlen) evicts the oldest entry
        self._error_history.append(event)

    def _update_error_counts(self, event: ErrorEvent) -> None:
        self._error_counts[event.error_key] = self._error_counts.get(event.error_key, 0) + 1
        self._last_error_times[event.error_key] = event.timestamp

    def _check_for_critical_patterns(self, event: ErrorEvent) -> None:
        self._check_critical_error_threshold(event)
        self._check_cascading_failures()

        if event.category == ErrorCategory.CIRCUIT_BREAKER:
            self._alert_manager.trigger_circuit_breaker_alert(event.error_key, event.context)

        if self.config.enable_health_monitoring:
            self._check_system_health()

    def _check_critical_error_threshold(self, event: ErrorEvent) -> None:
        threshold = self.config.critical_error_threshold
        if self._error_counts.get(event.error_key, 0) < threshold:
            return

        now = self._clock()
        recent_same_errors = sum(
            1 for e in self._error_history
            if e.error_key == event.error_key
            and e.is_recent(self.config.error_window_duration, now)
        )

        if recent_same_errors >= threshold:
            self._alert_manager.trigger_critical_error_alert(
                event.error_key,
                recent_same_errors,
                event,
            )

    def _check_cascading_failures(self) -> None:
        recent_errors = self._get_recent_errors(self.config.cascading_failure_window)
        analysis = self._health_monitor.analyze_cascading_failures(recent_errors)

        if analysis.is_cascading_failure:
            self._alert_manager.trigger_cascading_failure_alert(
                analysis.unique_error_types,
                analysis.total_errors,
                analysis.time_window,
            )

    def _check_system_health(self) -> None:
        recent_errors = self._get_recent_errors(self.config.health_check_window)
        health_score = self._health_monitor.calculate_health_score(recent_errors)

        if health_score < self.config.health_alert_score_threshold:
            self._alert_manager.trigger_system_health_alert(health_score, len(recent_errors))

    def _log_error_event(self, event: ErrorEvent) -> None:
        enhanced_metadata = {
            'error_category': event.category.value,
            'error_type': type(event.error).__name__,
            'context': event.context,
            'is_user_recoverable': event.is_user_recoverable,
            'severity': event.severity.value,
            'error_key': event.error_key,
            'requires_immediate_attention': event.severity == ErrorSeverity.CRITICAL,
        }
        enhanced_metadata.update(event.metadata)

        self._logger.error(
            f"Error recorded: {event.error}",
            operation='ERROR_MONITORING',
            error=event.error,
            stack_trace=event.stack_trace,
            context=enhanced_metadata
        )

    def _log_recording_failure(self, failure: Exception, context: str) -> None:
        try:
            self._logger.error(
                f"Failed to record error: {failure}",
                operation='ERROR_RECORDING_FAILURE',
                error=failure,
                stack_trace=traceback.format_exc(),
                context={'context': context}
            )
        except Exception as sink_error:
            # The sink is broken too; go straight to the logging system
            self._fallback_logger.log_error_with_context(
                failure,
                {'context': context, 'sink_error': str(sink_error)},
                operation='ERROR_RECORDING_FAILURE'
            )

    def _get_recent_errors(self, window: timedelta) -> List[ErrorEvent]:
        cutoff = self._clock() - window
        return [event for event in self._error_history if event.timestamp > cutoff]

    def _get_most_frequent_errors(self) -> List[Dict[str, Any]]:
        # sorted() is stable, so equal counts keep first-seen order
        ranked = sorted(self._error_counts.items(), key=lambda item: item[1], reverse=True)

        return [
            {
                'error_key': error_key,
                'count': count,
                'last_occurrence': self._last_error_times[error_key].isoformat(),
            }
            for error_key, count in ranked[:self.config.max_frequent_errors_to_show]
        ]


# Global error monitor instance
_error_monitor: Optional[ErrorMonitor] = None
_error_monitor_lock = threading.Lock()


def initialize_error_monitor(
    config: Optional[BaseConfig] = None,
    logger: Optional[MonitoringLogger] = None,
    clock: Optional[Callable[[], datetime]] = None
) -> ErrorMonitor:
    """Create and initialize the global error monitor, replacing any previous one."""
    global _error_monitor
    with _error_monitor_lock:
        if _error_monitor is not None:
            _error_monitor.dispose()

        _error_monitor = ErrorMonitor(config=config, logger=logger, clock=clock).initialize()
        return _error_monitor


def get_error_monitor() -> ErrorMonitor:
    """Get the global error monitor."""
    if _error_monitor is None:
        raise MonitorNotInitializedError(
            "Error monitor not initialized. Call initialize_error_monitor() first."
        )
    return _error_monitor


def shutdown_error_monitor() -> None:
    """Dispose and drop the global error monitor."""
    global _error_monitor
    with _error_monitor_lock:
        if _error_monitor is not None:
            _error_monitor.dispose()
            _error_monitor = None


def record_error(
    error: Any,
    context: str,
    stack_trace: Any = None,
    metadata: Optional[Mapping[str, Any]] = None
) -> Optional[ErrorEvent]:
    """Record an error on the global monitor."""
    return get_error_monitor().record_error(error, context, stack_trace, metadata)


def monitor_errors(context: Optional[str] = None, metadata: Optional[Mapping[str, Any]] = None):
    """
    Decorator that records exceptions raised by the wrapped function on the
    global monitor and re-raises them.

    Args:
        context: Context recorded with the error; defaults to the function's
            qualified name
        metadata: Extra fields attached to every recorded event
    """
    def decorator(func):
        error_context = context or func.__qualname__

        def _record(e: Exception) -> None:
            try:
                get_error_monitor().record_error(e, error_context, metadata=metadata)
            except MonitorNotInitializedError:
                logger.warning(f"Error monitor not initialized; unrecorded error in {error_context}: {e}")

        if inspect.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    _record(e)
                    raise
            return async_wrapper

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                _record(e)
                raise
        return wrapper

    return decorator
