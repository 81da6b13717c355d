"""
Pytest configuration and shared fixtures.
"""

import os

os.environ.setdefault("ENVIRONMENT", "testing")

import pytest
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from configs.environments.testing import TestingConfig
from error_monitoring import ErrorMonitor, MonitoringLogger, shutdown_error_monitor


class RecordingLogger(MonitoringLogger):
    """Log sink that keeps every entry in memory."""

    def __init__(self):
        self.entries: List[Dict[str, Any]] = []

    def info(self, message, operation=None, context=None):
        self.entries.append({
            'level': 'info',
            'message': message,
            'operation': operation,
            'error': None,
            'stack_trace': None,
            'context': dict(context or {}),
        })

    def error(self, message, operation=None, error=None, stack_trace=None, context=None):
        self.entries.append({
            'level': 'error',
            'message': message,
            'operation': operation,
            'error': error,
            'stack_trace': stack_trace,
            'context': dict(context or {}),
        })

    def entries_for(self, operation: str) -> List[Dict[str, Any]]:
        return [entry for entry in self.entries if entry['operation'] == operation]

    def count(self, operation: str) -> int:
        return len(self.entries_for(operation))


class FailingLogger(MonitoringLogger):
    """Log sink that always raises."""

    def info(self, message, operation=None, context=None):
        raise RuntimeError("sink unavailable")

    def error(self, message, operation=None, error=None, stack_trace=None, context=None):
        raise RuntimeError("sink unavailable")


class FixedClock:
    """Manually advanced clock."""

    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2026, 1, 15, 12, 0, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def testing_config() -> TestingConfig:
    """Testing profile settings."""
    return TestingConfig()


@pytest.fixture
def make_config():
    """Factory for testing settings with overrides."""
    def _make(**overrides) -> TestingConfig:
        return TestingConfig(**overrides)
    return _make


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def monitor(testing_config, recording_logger, clock):
    """Initialized monitor with a recording sink and fixed clock."""
    error_monitor = ErrorMonitor(
        config=testing_config,
        logger=recording_logger,
        clock=clock
    ).initialize()

    yield error_monitor

    error_monitor.dispose()


@pytest.fixture
def make_monitor(recording_logger, clock):
    """Factory for initialized monitors with custom settings."""
    created = []

    def _make(config=None, logger=None) -> ErrorMonitor:
        error_monitor = ErrorMonitor(
            config=config or TestingConfig(),
            logger=logger or recording_logger,
            clock=clock
        ).initialize()
        created.append(error_monitor)
        return error_monitor

    yield _make

    for error_monitor in created:
        error_monitor.dispose()


@pytest.fixture(autouse=True)
def reset_global_monitor():
    """Make sure no test leaks the global monitor."""
    yield
    shutdown_error_monitor()
