"""
Error classification.

Maps arbitrary error objects to a category, severity, recoverability flag
and grouping key. Classification is pure and never raises.
"""

from typing import Any, Dict, Optional

from .error_enums import ErrorCategory, ErrorSeverity
from .exceptions import AppException, ErrorKind


_KIND_TO_CATEGORY: Dict[ErrorKind, ErrorCategory] = {
    ErrorKind.NETWORK: ErrorCategory.NETWORK,
    ErrorKind.AUTHENTICATION: ErrorCategory.AUTHENTICATION,
    ErrorKind.AI_SERVICE: ErrorCategory.AI_SERVICE,
    ErrorKind.AI_PROCESSING: ErrorCategory.AI_SERVICE,
    ErrorKind.VALIDATION: ErrorCategory.VALIDATION,
    ErrorKind.PERMISSION: ErrorCategory.PERMISSION,
    ErrorKind.CIRCUIT_BREAKER_OPEN: ErrorCategory.CIRCUIT_BREAKER,
    ErrorKind.STORAGE: ErrorCategory.STORAGE,
    ErrorKind.FIREBASE_INITIALIZATION: ErrorCategory.FIREBASE,
    ErrorKind.FIREBASE_AI: ErrorCategory.FIREBASE,
}

_USER_RECOVERABLE: Dict[ErrorCategory, bool] = {
    ErrorCategory.VALIDATION: True,
    ErrorCategory.NETWORK: True,
    ErrorCategory.CIRCUIT_BREAKER: True,
    ErrorCategory.PERMISSION: True,
    ErrorCategory.AUTHENTICATION: False,
    ErrorCategory.AI_SERVICE: False,
    ErrorCategory.STORAGE: False,
    ErrorCategory.FIREBASE: False,
    ErrorCategory.UNKNOWN: False,
}

# Kind-specific escalations, checked before the category table
_KIND_SEVERITY_OVERRIDES: Dict[ErrorKind, ErrorSeverity] = {
    ErrorKind.CIRCUIT_BREAKER_OPEN: ErrorSeverity.HIGH,
    ErrorKind.FIREBASE_INITIALIZATION: ErrorSeverity.CRITICAL,
}

_CATEGORY_SEVERITY: Dict[ErrorCategory, ErrorSeverity] = {
    ErrorCategory.AUTHENTICATION: ErrorSeverity.MEDIUM,
    ErrorCategory.NETWORK: ErrorSeverity.MEDIUM,
    ErrorCategory.AI_SERVICE: ErrorSeverity.MEDIUM,
    ErrorCategory.VALIDATION: ErrorSeverity.LOW,
    ErrorCategory.PERMISSION: ErrorSeverity.HIGH,
    ErrorCategory.CIRCUIT_BREAKER: ErrorSeverity.HIGH,
    ErrorCategory.STORAGE: ErrorSeverity.CRITICAL,
    ErrorCategory.FIREBASE: ErrorSeverity.CRITICAL,
    ErrorCategory.UNKNOWN: ErrorSeverity.UNKNOWN,
}


def _error_kind(error: Any) -> Optional[ErrorKind]:
    """Read the classification tag of an error, if it carries one."""
    try:
        kind = getattr(error, 'error_kind', None)
    except Exception:
        return None
    return kind if isinstance(kind, ErrorKind) else None


def _is_domain_error(error: Any) -> bool:
    return isinstance(error, AppException) or _error_kind(error) is not None


class ErrorClassifier:
    """Stateless error classifier."""

    def categorize_error(self, error: Any) -> ErrorCategory:
        """Categorize an error; unrecognised errors are UNKNOWN."""
        kind = _error_kind(error)
        if kind is None:
            return ErrorCategory.UNKNOWN
        return _KIND_TO_CATEGORY.get(kind, ErrorCategory.UNKNOWN)

    def is_user_recoverable(self, error: Any) -> bool:
        """Whether the user can recover from the error by retrying or fixing input."""
        return _USER_RECOVERABLE[self.categorize_error(error)]

    def get_error_severity(self, error: Any) -> ErrorSeverity:
        """Severity of an error."""
        kind = _error_kind(error)
        if kind in _KIND_SEVERITY_OVERRIDES:
            return _KIND_SEVERITY_OVERRIDES[kind]
        return _CATEGORY_SEVERITY[self.categorize_error(error)]

    def generate_error_key(self, error: Any) -> str:
        """
        Generate the grouping key for an error.

        Domain errors group by type name and code
        (``"NetworkException:timeout"``, ``"NetworkException:no_code"``);
        other errors group by type name alone.
        """
        type_name = type(error).__name__
        if not _is_domain_error(error):
            return type_name

        try:
            code = getattr(error, 'code', None)
        except Exception:
            code = None
        return f"{type_name}:{code if code is not None else 'no_code'}"

    def should_trigger_immediate_alert(self, error: Any) -> bool:
        """Critical errors need attention without waiting for a pattern."""
        return self.get_error_severity(error) == ErrorSeverity.CRITICAL

    def describe_error(self, error: Any) -> str:
        """Human-readable one-line description."""
        category = self.categorize_error(error)
        severity = self.get_error_severity(error)
        return f"Error in {category.value} ({severity.value}): {type(error).__name__}"
