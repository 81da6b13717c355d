"""
Exception types understood by the error monitor.

Two families live here:

- The application error hierarchy (``AppException`` and subclasses). Each
  subclass carries an ``error_kind`` tag which the classifier dispatches
  on. Host types outside this hierarchy can take part in classification
  by exposing an ``error_kind`` attribute holding an ``ErrorKind`` and,
  optionally, a ``code`` attribute.
- Caller errors raised by the monitor itself (``MonitorError`` and
  subclasses).
"""

from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Dict, Optional


class ErrorKind(Enum):
    """Closed set of error kinds the classifier recognises."""
    NETWORK = "network"
    AUTHENTICATION = "authentication"
    AI_SERVICE = "ai_service"
    AI_PROCESSING = "ai_processing"
    VALIDATION = "validation"
    PERMISSION = "permission"
    CIRCUIT_BREAKER_OPEN = "circuit_breaker_open"
    STORAGE = "storage"
    FIREBASE_INITIALIZATION = "firebase_initialization"
    FIREBASE_AI = "firebase_ai"


class AppException(Exception):
    """Base exception for application errors."""

    error_kind: ClassVar[Optional[ErrorKind]] = None

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        metadata: Dict[str, Any] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.metadata = metadata or {}
        self.timestamp = datetime.now()

    def __str__(self) -> str:
        if self.code is not None:
            return f"{type(self).__name__}: {self.message} (code: {self.code})"
        return f"{type(self).__name__}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to structured log format."""
        return {
            'error_type': type(self).__name__,
            'error_kind': self.error_kind.value if self.error_kind else None,
            'message': self.message,
            'code': self.code,
            'metadata': self.metadata,
            'timestamp': self.timestamp.isoformat(),
        }


class NetworkException(AppException):
    error_kind = ErrorKind.NETWORK


class AuthenticationException(AppException):
    error_kind = ErrorKind.AUTHENTICATION


class AIServiceException(AppException):
    error_kind = ErrorKind.AI_SERVICE


class AIProcessingException(AppException):
    error_kind = ErrorKind.AI_PROCESSING


class ValidationException(AppException):
    error_kind = ErrorKind.VALIDATION


class PermissionException(AppException):
    error_kind = ErrorKind.PERMISSION


class CircuitBreakerOpenException(AppException):
    """Raised when a call is rejected by an open circuit breaker."""

    error_kind = ErrorKind.CIRCUIT_BREAKER_OPEN

    def __init__(
        self,
        message: str = "Circuit breaker is open",
        code: Optional[str] = None,
        metadata: Dict[str, Any] = None
    ):
        super().__init__(message, code, metadata)


class StorageException(AppException):
    error_kind = ErrorKind.STORAGE


class FirebaseInitializationException(AppException):
    error_kind = ErrorKind.FIREBASE_INITIALIZATION


class FirebaseAIException(AppException):
    error_kind = ErrorKind.FIREBASE_AI


# Application errors without a classification tag. They classify as
# unknown but still group by code.

class ImageProcessingException(AppException):
    pass


class QuotaExceededException(AppException):
    pass


class CacheException(AppException):
    pass


class ServerException(AppException):
    pass


class MonitorError(Exception):
    """Base class for errors raised by the monitor to its caller."""


class MonitorNotInitializedError(MonitorError):
    """Raised when the monitor is used before initialize() or after dispose()."""

    def __init__(self, message: str = "Error monitor not initialized. Call initialize() first."):
        super().__init__(message)


class HealthMonitoringDisabledError(MonitorError):
    """Raised when a health report is requested while health monitoring is off."""

    def __init__(self, message: str = "Health monitoring is disabled"):
        super().__init__(message)
