"""
Logging utilities for the error monitoring service.
Provides structured logging with monitoring-specific log levels,
category-routed log files and JSON/text formatting.
"""

import logging
import logging.handlers
import os
import sys
import json
import threading
from datetime import datetime, timezone
from typing import Optional, Dict, Any
from pathlib import Path
from dataclasses import dataclass, field
from enum import Enum


class LogLevel(Enum):
    """Log levels used by the monitoring service."""
    TRACE = 5        # Detailed execution traces
    DEBUG = 10
    INFO = 20
    AUDIT = 25       # Operator actions (resets, shutdowns)
    WARNING = 30
    ERROR = 40
    ALERT = 45       # Alert lifecycle events
    CRITICAL = 50


class LogCategory(Enum):
    """Log categories for routing and filtering."""
    MONITORING = "monitoring"
    ALERT = "alert"
    HEALTH = "health"
    SYSTEM = "system"
    ERROR = "error"
    AUDIT = "audit"
    API = "api"


@dataclass
class LogConfig:
    """Configuration for the logging system."""
    level: str = "INFO"
    format_type: str = "json"
    log_dir: Path = field(default_factory=lambda: Path("logs"))
    max_file_size: int = 50_000_000  # 50MB
    backup_count: int = 5
    console_output: bool = True
    file_output: bool = True
    enable_alert_log: bool = True
    structured_metadata: bool = True

    @classmethod
    def from_settings(cls, settings: Any) -> 'LogConfig':
        """Build a LogConfig from application settings."""
        return cls(
            level=settings.log_level,
            format_type=settings.log_format,
            log_dir=Path(settings.log_dir),
            console_output=settings.console_output,
            file_output=settings.log_to_file,
        )


def setup_logging(config: Optional[LogConfig] = None) -> None:
    """
    Setup logging for the application.

    Args:
        config: LogConfig object; defaults are used when omitted
    """
    if config is None:
        config = LogConfig()

    for log_level in LogLevel:
        logging.addLevelName(log_level.value, log_level.name)

    if config.format_type == "json":
        formatter = EnhancedJsonFormatter(config)
    else:
        formatter = EnhancedTextFormatter()

    level = logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    handlers = []

    if config.console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    if config.file_output:
        config.log_dir.mkdir(parents=True, exist_ok=True)

        main_handler = logging.handlers.RotatingFileHandler(
            config.log_dir / "error_monitor.log",
            maxBytes=config.max_file_size,
            backupCount=config.backup_count
        )
        main_handler.setLevel(level)
        main_handler.setFormatter(formatter)
        handlers.append(main_handler)

        # Alert lifecycle log
        if config.enable_alert_log:
            alert_handler = logging.handlers.RotatingFileHandler(
                config.log_dir / "alerts.log",
                maxBytes=config.max_file_size,
                backupCount=config.backup_count
            )
            alert_handler.setLevel(LogLevel.INFO.value)
            alert_handler.setFormatter(formatter)
            alert_handler.addFilter(CategoryFilter(LogCategory.ALERT))
            handlers.append(alert_handler)

        error_handler = logging.handlers.RotatingFileHandler(
            config.log_dir / "errors.log",
            maxBytes=config.max_file_size,
            backupCount=config.backup_count
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        handlers.append(error_handler)

    logging.basicConfig(
        level=LogLevel.TRACE.value,  # Handlers do the filtering
        handlers=handlers,
        force=True
    )


class CategoryFilter(logging.Filter):
    """Filter logs by category."""

    def __init__(self, category: LogCategory):
        super().__init__()
        self.category = category.value

    def filter(self, record):
        return getattr(record, 'category', None) == self.category


class EnhancedJsonFormatter(logging.Formatter):
    """JSON formatter with structured metadata."""

    def __init__(self, config: Optional[LogConfig] = None):
        super().__init__()
        self.config = config or LogConfig()

    def format(self, record):
        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'thread_id': threading.get_ident(),
            'process_id': os.getpid()
        }

        if self.config.structured_metadata:
            if hasattr(record, 'category'):
                log_entry['category'] = record.category

            if hasattr(record, 'operation'):
                log_entry['operation'] = record.operation

            if hasattr(record, 'error_context'):
                log_entry['error'] = record.error_context

            if hasattr(record, 'extra_fields'):
                log_entry.update(record.extra_fields)

        if record.exc_info:
            log_entry['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': self.formatException(record.exc_info)
            }

        if record.pathname:
            log_entry['source'] = {
                'file': record.pathname,
                'line': record.lineno,
                'function': record.funcName
            }

        return json.dumps(log_entry, default=str)


class EnhancedTextFormatter(logging.Formatter):
    """Text formatter with category and operation prefixes."""

    def __init__(self):
        super().__init__(
            fmt='%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    def format(self, record):
        formatted = super().format(record)

        if hasattr(record, 'operation'):
            formatted = f"[{record.operation}] {formatted}"

        if hasattr(record, 'category'):
            formatted = f"[{record.category}] {formatted}"

        return formatted


def get_logger(name: str) -> logging.Logger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger
    """
    return logging.getLogger(name)


def get_enhanced_logger(name: str, category: Optional[LogCategory] = None) -> 'EnhancedLogger':
    """
    Get an enhanced logger instance with structured logging.

    Args:
        name: Logger name (typically __name__)
        category: Default log category

    Returns:
        Enhanced logger instance
    """
    return EnhancedLogger(name, category)


class EnhancedLogger:
    """Logger wrapper that attaches structured data to records."""

    def __init__(self, name: str, default_category: Optional[LogCategory] = None):
        self.logger = logging.getLogger(name)
        self.default_category = default_category

    def _log(
        self,
        level: int,
        message: str,
        category: Optional[LogCategory] = None,
        operation: Optional[str] = None,
        error_context: Optional[Dict[str, Any]] = None,
        **extra_fields
    ):
        """Internal logging method with structured data."""
        if not self.logger.isEnabledFor(level):
            return

        record = self.logger.makeRecord(
            name=self.logger.name,
            level=level,
            fn="",
            lno=0,
            msg=message,
            args=(),
            exc_info=None
        )

        if category or self.default_category:
            record.category = (category or self.default_category).value

        if operation:
            record.operation = operation

        if error_context:
            record.error_context = error_context

        if extra_fields:
            record.extra_fields = extra_fields

        self.logger.handle(record)

    def trace(self, message: str, **kwargs):
        self._log(LogLevel.TRACE.value, message, **kwargs)

    def debug(self, message: str, **kwargs):
        self._log(LogLevel.DEBUG.value, message, **kwargs)

    def info(self, message: str, **kwargs):
        self._log(LogLevel.INFO.value, message, **kwargs)

    def audit(self, message: str, **kwargs):
        """Log operator actions."""
        kwargs.setdefault('category', LogCategory.AUDIT)
        self._log(LogLevel.AUDIT.value, message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log(LogLevel.WARNING.value, message, **kwargs)

    def error(self, message: str, **kwargs):
        kwargs.setdefault('category', LogCategory.ERROR)
        self._log(LogLevel.ERROR.value, message, **kwargs)

    def alert(self, message: str, **kwargs):
        """Log alert lifecycle events."""
        kwargs.setdefault('category', LogCategory.ALERT)
        self._log(LogLevel.ALERT.value, message, **kwargs)

    def log_error_with_context(
        self,
        error: BaseException,
        context: Dict[str, Any],
        severity: str = "error",
        operation: Optional[str] = None
    ):
        """Log an exception with additional context."""
        error_context = {
            'error_type': type(error).__name__,
            'error_message': str(error),
            'context': context,
            'timestamp': datetime.now(timezone.utc).isoformat()
        }

        level_map = {
            'warning': LogLevel.WARNING.value,
            'error': LogLevel.ERROR.value,
            'critical': LogLevel.CRITICAL.value
        }

        level = level_map.get(severity.lower(), LogLevel.ERROR.value)

        self._log(
            level,
            f"Error occurred: {error}",
            category=LogCategory.ERROR,
            operation=operation,
            error_context=error_context
        )
