"""
FastAPI dependency injection functions.
"""

from fastapi import HTTPException, Request

from configs.environments.base import BaseConfig
from configs.settings import get_settings
from error_monitoring import ErrorMonitor
from utils.logging import get_logger

logger = get_logger(__name__)


def get_app_settings() -> BaseConfig:
    """Get application settings."""
    return get_settings()


def get_monitor(request: Request) -> ErrorMonitor:
    """
    Get the error monitor attached to the application.

    Raises:
        HTTPException: 503 if no initialized monitor is attached
    """
    monitor = getattr(request.app.state, 'monitor', None)

    if monitor is None or not monitor.is_initialized:
        logger.warning("Request received while error monitor is not initialized")
        raise HTTPException(status_code=503, detail="Error monitor not initialized")

    return monitor
