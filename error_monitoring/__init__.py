"""
Error monitoring and alerting for the Revision app backend.

This package provides:
- Error classification into categories, severities and grouping keys
- A bounded rolling history of error events
- Detection of repeated-error bursts and cascading failures
- Health scoring and reports
- Alert lifecycle management with cooldowns
"""

# Domain errors and monitor errors
from .exceptions import (
    ErrorKind, AppException, NetworkException, AuthenticationException,
    AIServiceException, AIProcessingException, ValidationException,
    PermissionException, CircuitBreakerOpenException, StorageException,
    FirebaseInitializationException, FirebaseAIException,
    ImageProcessingException, QuotaExceededException, CacheException,
    ServerException, MonitorError, MonitorNotInitializedError,
    HealthMonitoringDisabledError
)

# Classification
from .error_enums import ErrorCategory, ErrorSeverity, AlertType
from .error_classifier import ErrorClassifier
from .error_event import ErrorEvent

# Alerting
from .alert_manager import AlertManager, Alert

# Health analysis
from .health_monitor import (
    SystemHealthMonitor, SystemHealthReport,
    CascadingFailureAnalysis, ErrorPatternAnalysis
)
from .resources import ResourceUsage, capture_resource_usage

# Logging integration
from .logging_integration import MonitoringLogger, EnhancedMonitoringLogger

# Orchestration
from .error_monitor import (
    ErrorMonitor, ErrorStatistics, MonitorState,
    initialize_error_monitor, get_error_monitor, shutdown_error_monitor,
    record_error, monitor_errors
)

__all__ = [
    # Errors
    "ErrorKind", "AppException", "NetworkException", "AuthenticationException",
    "AIServiceException", "AIProcessingException", "ValidationException",
    "PermissionException", "CircuitBreakerOpenException", "StorageException",
    "FirebaseInitializationException", "FirebaseAIException",
    "ImageProcessingException", "QuotaExceededException", "CacheException",
    "ServerException", "MonitorError", "MonitorNotInitializedError",
    "HealthMonitoringDisabledError",

    # Classification
    "ErrorCategory", "ErrorSeverity", "AlertType", "ErrorClassifier", "ErrorEvent",

    # Alerting
    "AlertManager", "Alert",

    # Health
    "SystemHealthMonitor", "SystemHealthReport",
    "CascadingFailureAnalysis", "ErrorPatternAnalysis",
    "ResourceUsage", "capture_resource_usage",

    # Logging
    "MonitoringLogger", "EnhancedMonitoringLogger",

    # Monitor
    "ErrorMonitor", "ErrorStatistics", "MonitorState",
    "initialize_error_monitor", "get_error_monitor", "shutdown_error_monitor",
    "record_error", "monitor_errors",
]
