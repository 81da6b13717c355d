"""
Test suite for the error monitoring service.

This module contains:
- Unit tests for classification, alerting, health analysis and the monitor
- API tests using the FastAPI test client
- Shared fixtures (testing settings, recording log sink, fixed clock)
"""

__version__ = "1.0.0"
