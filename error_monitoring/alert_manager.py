"""
Alert lifecycle management.

Each ``AlertType`` is a small state machine: inactive until triggered,
then active until it is reset manually or its cooldown timer fires. An
active alert type does not retrigger, which keeps a burst of errors from
flooding the log with duplicate alerts.
"""

from typing import Dict, List, Optional, Any, Callable, Set
from datetime import datetime, timedelta
from dataclasses import dataclass, field
import threading

from .error_enums import AlertType
from .error_event import ErrorEvent
from .logging_integration import MonitoringLogger
from utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class Alert:
    """Record handed to alert handlers when an alert fires."""
    alert_type: AlertType
    message: str
    context: Dict[str, Any] = field(default_factory=dict)
    triggered_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'alert_type': self.alert_type.value,
            'message': self.message,
            'context': self.context,
            'triggered_at': self.triggered_at.isoformat(),
        }


AlertHandler = Callable[[Alert], None]


def _describe_window(window: timedelta) -> str:
    seconds = int(window.total_seconds())
    if seconds % 60 == 0:
        return f"{seconds // 60} minutes"
    return f"{seconds} seconds"


class AlertManager:
    """Tracks active alerts, cooldowns and reset timers."""

    def __init__(
        self,
        logger: MonitoringLogger,
        cooldown: timedelta = timedelta(minutes=15),
        error_window: timedelta = timedelta(minutes=5),
        clock: Optional[Callable[[], datetime]] = None
    ):
        self._logger = logger
        self.cooldown = cooldown
        self.error_window = error_window
        self._clock = clock or datetime.now

        self._active_alerts: Set[AlertType] = set()
        self._last_alert_times: Dict[AlertType, datetime] = {}
        self._alert_timers: Dict[AlertType, threading.Timer] = {}
        self._handlers: List[AlertHandler] = []
        self._disposed = False

        # Re-entrant: the timer callback resets while holding the lock
        self._lock = threading.RLock()

    @classmethod
    def from_config(
        cls,
        config: Any,
        logger: MonitoringLogger,
        clock: Optional[Callable[[], datetime]] = None
    ) -> 'AlertManager':
        """Build an alert manager from monitoring settings."""
        return cls(
            logger,
            cooldown=config.alert_cooldown,
            error_window=config.error_window_duration,
            clock=clock,
        )

    def is_alert_active(self, alert_type: AlertType) -> bool:
        with self._lock:
            return alert_type in self._active_alerts

    @property
    def has_active_alerts(self) -> bool:
        with self._lock:
            return bool(self._active_alerts)

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def trigger_critical_error_alert(self, error_key: str, count: int, event: ErrorEvent) -> bool:
        """Alert on a burst of the same error. Returns True if the alert fired."""
        alert_type = AlertType.CRITICAL_ERROR_PATTERN
        if not self._activate_alert(alert_type):
            return False

        message = (
            f"🚨 CRITICAL ERROR PATTERN: {error_key} occurred {count} times "
            f"in {_describe_window(self.error_window)}"
        )
        context = {
            'error_key': error_key,
            'count': count,
            'severity': event.severity.value,
            'category': event.category.value,
        }
        self._logger.error(
            message,
            operation=alert_type.value,
            error=event.error,
            stack_trace=event.stack_trace,
            context=context
        )

        self._notify_handlers(Alert(alert_type, message, context, self._clock()))
        return True

    def trigger_cascading_failure_alert(
        self,
        unique_error_types: int,
        total_errors: int,
        time_window: timedelta
    ) -> bool:
        """Alert on many distinct errors in a short window."""
        alert_type = AlertType.CASCADING_FAILURE
        if not self._activate_alert(alert_type):
            return False

        message = (
            f"🚨 CASCADING FAILURE DETECTED: {unique_error_types} error types, "
            f"{total_errors} errors in {_describe_window(time_window)}"
        )
        context = {
            'unique_error_types': unique_error_types,
            'total_errors': total_errors,
            'time_window_minutes': round(time_window.total_seconds() / 60, 2),
        }
        self._logger.error(message, operation=alert_type.value, context=context)

        self._notify_handlers(Alert(alert_type, message, context, self._clock()))
        return True

    def trigger_system_health_alert(self, health_score: int, recent_error_count: int) -> bool:
        """Alert on a degraded health score."""
        alert_type = AlertType.SYSTEM_HEALTH_DEGRADED
        if not self._activate_alert(alert_type):
            return False

        message = (
            f"🚨 SYSTEM HEALTH DEGRADED: Health score {health_score}, "
            f"{recent_error_count} recent errors"
        )
        context = {
            'health_score': health_score,
            'recent_error_count': recent_error_count,
        }
        self._logger.error(message, operation=alert_type.value, context=context)

        self._notify_handlers(Alert(alert_type, message, context, self._clock()))
        return True

    def trigger_circuit_breaker_alert(self, error_key: str, context: str) -> bool:
        """Alert when a circuit breaker starts rejecting calls."""
        alert_type = AlertType.CIRCUIT_BREAKER_TRIPPED
        if not self._activate_alert(alert_type):
            return False

        message = f"🚨 CIRCUIT BREAKER TRIPPED: {error_key} in {context}"
        alert_context = {
            'error_key': error_key,
            'context': context,
        }
        self._logger.error(message, operation=alert_type.value, context=alert_context)

        self._notify_handlers(Alert(alert_type, message, alert_context, self._clock()))
        return True

    def can_trigger_alert(self, alert_type: AlertType, min_interval: Optional[timedelta] = None) -> bool:
        """Check if enough time has passed since the last alert of this type."""
        interval = min_interval if min_interval is not None else self.cooldown
        with self._lock:
            last_alert = self._last_alert_times.get(alert_type)

        if last_alert is None:
            return True

        return self._clock() - last_alert >= interval

    def reset_alert(self, alert_type: AlertType) -> None:
        """Deactivate an alert and cancel its pending reset timer."""
        with self._lock:
            timer = self._alert_timers.pop(alert_type, None)
            if timer is not None:
                timer.cancel()

            if alert_type not in self._active_alerts:
                return
            self._active_alerts.discard(alert_type)

            self._logger.info(
                f"Alert reset: {alert_type.value}",
                operation='ALERT_RESET',
                context={'alert_type': alert_type.value}
            )

    def reset_all_alerts(self) -> None:
        """Reset every active alert."""
        with self._lock:
            for alert_type in list(self._active_alerts):
                self.reset_alert(alert_type)

    def get_alert_stats(self) -> Dict[str, Any]:
        """Get alert statistics."""
        with self._lock:
            return {
                'active_alerts': [a.value for a in AlertType if a in self._active_alerts],
                'active_alert_count': len(self._active_alerts),
                'last_alert_times': {
                    alert_type.value: timestamp.isoformat()
                    for alert_type, timestamp in self._last_alert_times.items()
                },
            }

    def add_alert_handler(self, handler: AlertHandler) -> None:
        """Register a callable invoked with every fired ``Alert``."""
        with self._lock:
            self._handlers.append(handler)

    def remove_alert_handler(self, handler: AlertHandler) -> bool:
        with self._lock:
            if handler in self._handlers:
                self._handlers.remove(handler)
                return True
            return False

    def dispose(self) -> None:
        """Cancel all timers and clear state. Later triggers are no-ops."""
        with self._lock:
            self._disposed = True
            for timer in self._alert_timers.values():
                timer.cancel()
            self._alert_timers.clear()
            self._active_alerts.clear()
            self._handlers.clear()

    # Private methods

    def _activate_alert(self, alert_type: AlertType) -> bool:
        """Atomically move an alert type from inactive to active.

        The reset timer is armed here, before anything is logged, so an
        active alert always has a pending reset.
        """
        with self._lock:
            if self._disposed or alert_type in self._active_alerts:
                return False
            self._active_alerts.add(alert_type)
            self._last_alert_times[alert_type] = self._clock()
            self._schedule_alert_reset(alert_type)
            return True

    def _schedule_alert_reset(self, alert_type: AlertType) -> None:
        with self._lock:
            if self._disposed:
                return

            previous = self._alert_timers.pop(alert_type, None)
            if previous is not None:
                previous.cancel()

            def expire():
                self._on_cooldown_expired(alert_type, timer)

            timer = threading.Timer(self.cooldown.total_seconds(), expire)
            timer.daemon = True
            self._alert_timers[alert_type] = timer
            timer.start()

    def _on_cooldown_expired(self, alert_type: AlertType, timer: threading.Timer) -> None:
        with self._lock:
            # A manual reset or retrigger may have replaced this timer
            if self._disposed or self._alert_timers.get(alert_type) is not timer:
                return
            try:
                self.reset_alert(alert_type)
            except Exception as e:
                logger.error(f"Automatic alert reset failed for {alert_type.value}: {e}")

    def _notify_handlers(self, alert: Alert) -> None:
        with self._lock:
            handlers = list(self._handlers)

        for handler in handlers:
            try:
                handler(alert)
            except Exception as e:
                logger.error(f"Alert handler failed for {alert.alert_type.value}: {e}")
