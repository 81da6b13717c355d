"""
Immutable error event records.
"""

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from .error_enums import ErrorCategory, ErrorSeverity


@dataclass(frozen=True)
class ErrorEvent:
    """A single recorded error with its classification.

    Events compare equal when key, timestamp and context match; the
    original error object and metadata do not take part in equality.
    """
    error: Any = field(compare=False)
    stack_trace: str = field(compare=False, repr=False)
    context: str
    timestamp: datetime
    category: ErrorCategory = field(compare=False)
    severity: ErrorSeverity = field(compare=False)
    is_user_recoverable: bool = field(compare=False)
    error_key: str
    metadata: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        # Private copy so later changes to the caller's dict are not seen
        object.__setattr__(self, 'metadata', MappingProxyType(dict(self.metadata)))

    def copy_with(self, **changes) -> 'ErrorEvent':
        """Return a copy with the given fields replaced."""
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'error_type': type(self.error).__name__,
            'context': self.context,
            'timestamp': self.timestamp.isoformat(),
            'category': self.category.value,
            'severity': self.severity.value,
            'is_user_recoverable': self.is_user_recoverable,
            'error_key': self.error_key,
            'metadata': dict(self.metadata),
        }

    def is_recent(self, window: timedelta, now: Optional[datetime] = None) -> bool:
        """Check whether the event happened within ``window`` of ``now``."""
        now = now or datetime.now()
        return self.timestamp > now - window

    @property
    def age(self) -> timedelta:
        return datetime.now() - self.timestamp

    def __str__(self) -> str:
        return (
            f"ErrorEvent({self.category.value}/{self.severity.value}): "
            f"{self.error} at {self.context}"
        )
