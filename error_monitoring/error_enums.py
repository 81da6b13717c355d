"""
Enumerations shared by the error monitoring components.
"""

from enum import Enum


class ErrorCategory(Enum):
    """Error categories for classification."""
    NETWORK = "network"
    AUTHENTICATION = "authentication"
    AI_SERVICE = "ai_service"
    VALIDATION = "validation"
    PERMISSION = "permission"
    CIRCUIT_BREAKER = "circuit_breaker"
    STORAGE = "storage"
    FIREBASE = "firebase"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


class ErrorSeverity(Enum):
    """Error severity levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


class AlertType(Enum):
    """Alert types raised by the monitor."""
    CRITICAL_ERROR_PATTERN = "CRITICAL_ERROR_PATTERN"
    CASCADING_FAILURE = "CASCADING_FAILURE"
    SYSTEM_HEALTH_DEGRADED = "SYSTEM_HEALTH_DEGRADED"
    CIRCUIT_BREAKER_TRIPPED = "CIRCUIT_BREAKER_TRIPPED"

    def __str__(self) -> str:
        return self.value
