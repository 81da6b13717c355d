"""
Integration between the error monitor and the logging system.

The monitor writes through a ``MonitoringLogger`` sink. The default sink
routes entries to ``utils.logging`` with the operation and context attached
as structured fields, so alert entries land in the alert log.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
import threading

from .error_enums import AlertType
from utils.logging import get_enhanced_logger, LogCategory, LogLevel

_ALERT_OPERATIONS = frozenset(alert_type.value for alert_type in AlertType) | {'ALERT_RESET'}

_OPERATION_CATEGORIES = {
    'ERROR_MONITORING': LogCategory.MONITORING,
    'ERROR_RECORDING_FAILURE': LogCategory.SYSTEM,
    'MONITOR_RESET': LogCategory.AUDIT,
    'MONITOR_INITIALIZED': LogCategory.SYSTEM,
    'MONITOR_DISPOSED': LogCategory.SYSTEM,
}


class MonitoringLogger(ABC):
    """Structured log sink used by the error monitor."""

    @abstractmethod
    def info(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        pass

    @abstractmethod
    def error(
        self,
        message: str,
        operation: Optional[str] = None,
        error: Any = None,
        stack_trace: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        pass


class EnhancedMonitoringLogger(MonitoringLogger):
    """Default sink backed by the enhanced logger."""

    def __init__(self, name: str = 'error_monitoring'):
        self.logger = get_enhanced_logger(name, LogCategory.MONITORING)
        self._lock = threading.Lock()

    def _category_for(self, operation: Optional[str]) -> LogCategory:
        if operation in _ALERT_OPERATIONS:
            return LogCategory.ALERT
        return _OPERATION_CATEGORIES.get(operation, LogCategory.MONITORING)

    def info(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        with self._lock:
            self.logger._log(
                LogLevel.INFO.value,
                message,
                category=self._category_for(operation),
                operation=operation,
                context=dict(context or {})
            )

    def error(
        self,
        message: str,
        operation: Optional[str] = None,
        error: Any = None,
        stack_trace: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        error_context = None
        if error is not None:
            error_context = {
                'error_type': type(error).__name__,
                'error_message': str(error),
            }
            if stack_trace:
                error_context['stack_trace'] = stack_trace

        # Alert lifecycle events get their own level
        if operation in _ALERT_OPERATIONS:
            level = LogLevel.ALERT.value
        else:
            level = LogLevel.ERROR.value

        with self._lock:
            self.logger._log(
                level,
                message,
                category=self._category_for(operation),
                operation=operation,
                error_context=error_context,
                context=dict(context or {})
            )
