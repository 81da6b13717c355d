"""
Shared utilities for the error monitoring service.
"""

__version__ = "1.0.0"
