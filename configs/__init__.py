"""
Configuration profiles for the error monitoring service.
"""

from .environments.base import BaseConfig
from .environments.development import DevelopmentConfig
from .environments.production import ProductionConfig
from .environments.testing import TestingConfig
from .settings import get_settings, get_config_class, validate_settings

__all__ = [
    "BaseConfig", "DevelopmentConfig", "ProductionConfig", "TestingConfig",
    "get_settings", "get_config_class", "validate_settings",
]
