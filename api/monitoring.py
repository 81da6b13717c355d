"""
Error statistics and operator reset endpoints.
"""

from datetime import datetime

from fastapi import APIRouter, Depends

from api.dependencies import get_monitor
from api.models import ErrorStatisticsResponse, ResetResponse
from error_monitoring import ErrorMonitor
from utils.logging import get_enhanced_logger, LogCategory

logger = get_enhanced_logger(__name__, LogCategory.API)

router = APIRouter(tags=["monitoring"])


@router.get("/errors/stats", response_model=ErrorStatisticsResponse)
async def error_statistics(monitor: ErrorMonitor = Depends(get_monitor)):
    """Get error statistics."""
    return monitor.get_error_statistics().to_dict()


@router.post("/alerts/reset", response_model=ResetResponse)
async def reset_alerts(monitor: ErrorMonitor = Depends(get_monitor)):
    """Reset all active alerts."""
    monitor.alert_manager.reset_all_alerts()
    logger.audit("All alerts reset via API", operation="ALERTS_RESET")

    return ResetResponse(status="ok", message="All alerts reset", timestamp=datetime.now())


@router.post("/monitor/reset", response_model=ResetResponse)
async def reset_monitor(monitor: ErrorMonitor = Depends(get_monitor)):
    """Clear error history, counters and alerts."""
    monitor.reset()
    logger.audit("Error monitor reset via API", operation="MONITOR_RESET")

    return ResetResponse(status="ok", message="Error monitoring state reset", timestamp=datetime.now())
