"""
Pydantic models for API responses.
"""

from datetime import datetime
from typing import List, Optional, Dict

from pydantic import BaseModel, Field


class CascadingFailureSummary(BaseModel):
    """Cascading failure section of a health report."""
    detected: bool = Field(..., description="Whether a cascading failure is in progress")
    unique_error_types: int = Field(..., description="Distinct error keys in the window")
    total_errors: int = Field(..., description="Errors in the window")


class ErrorPatternSummary(BaseModel):
    """Error pattern section of a health report."""
    total_errors: int = Field(..., description="Errors in the window")
    dominant_category: str = Field(..., description="Most frequent error category")
    dominant_severity: str = Field(..., description="Most frequent error severity")


class ResourceUsageModel(BaseModel):
    """Process resource snapshot."""
    process_memory_mb: float
    process_cpu_percent: float
    thread_count: int
    system_memory_percent: float
    captured_at: datetime


class HealthReportResponse(BaseModel):
    """Full system health report."""
    health_score: int = Field(..., ge=0, le=100, description="Health score (0-100)")
    is_healthy: bool
    has_active_alerts: bool
    cascading_failure: CascadingFailureSummary
    error_patterns: ErrorPatternSummary
    timestamp: datetime
    resource_usage: Optional[ResourceUsageModel] = None


class HealthScoreResponse(BaseModel):
    """Health score and verdict only."""
    health_score: int = Field(..., ge=0, le=100, description="Health score (0-100)")
    is_healthy: bool
    timestamp: datetime


class FrequentError(BaseModel):
    """One entry of the most frequent errors list."""
    error_key: str
    count: int
    last_occurrence: Optional[datetime] = None


class AlertStatsModel(BaseModel):
    """Alert manager statistics."""
    active_alerts: List[str] = Field(default_factory=list)
    active_alert_count: int = 0
    last_alert_times: Dict[str, datetime] = Field(default_factory=dict)


class ErrorStatisticsResponse(BaseModel):
    """Error statistics over the configured windows."""
    total_errors_24h: int
    total_errors_1h: int
    errors_by_category: Dict[str, int] = Field(default_factory=dict)
    unique_error_types: int
    most_frequent_errors: List[FrequentError] = Field(default_factory=list)
    alert_stats: AlertStatsModel
    timestamp: datetime


class ResetResponse(BaseModel):
    """Result of a reset operation."""
    status: str = Field(..., description="Operation status")
    message: str
    timestamp: datetime
