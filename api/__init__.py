"""
FastAPI REST API for the error monitoring service.

This module provides HTTP endpoints for:
- Health reports, scores and liveness/readiness probes
- Error statistics
- Operator resets of alerts and monitoring state
"""

__version__ = "1.0.0"
