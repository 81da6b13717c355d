"""
Health check endpoints backed by the error monitor.
"""

from datetime import datetime
from typing import Dict, Any

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_monitor
from api.models import HealthReportResponse, HealthScoreResponse
from error_monitoring import ErrorMonitor, HealthMonitoringDisabledError
from utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthReportResponse)
async def health_check(monitor: ErrorMonitor = Depends(get_monitor)):
    """Get the full system health report."""
    try:
        report = monitor.get_health_report()
    except HealthMonitoringDisabledError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return report.to_dict()


@router.get("/live")
async def liveness_probe() -> Dict[str, Any]:
    """Liveness probe - the process is up and serving requests."""
    return {"status": "ok", "timestamp": datetime.now()}


@router.get("/ready")
async def readiness_probe(monitor: ErrorMonitor = Depends(get_monitor)) -> Dict[str, Any]:
    """Readiness probe - unhealthy while alerts are active or errors pile up."""
    if not monitor.is_system_healthy():
        logger.warning("Readiness probe failed: system unhealthy")
        raise HTTPException(status_code=503, detail="Service not ready")

    return {"status": "ready", "timestamp": datetime.now()}


@router.get("/score", response_model=HealthScoreResponse)
async def health_score(monitor: ErrorMonitor = Depends(get_monitor)):
    """Get the health score (0-100)."""
    return HealthScoreResponse(
        health_score=monitor.get_health_score(),
        is_healthy=monitor.is_system_healthy(),
        timestamp=datetime.now()
    )
