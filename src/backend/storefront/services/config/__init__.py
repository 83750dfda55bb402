"""
Configuration Services
Provides centralized configuration management for the application
"""

from .configuration_service import ConfigurationService, get_config_service, init_config_service
from .config_validator import ConfigValidator, get_validator, validate_configs_on_startup

__all__ = [
    "ConfigurationService",
    "get_config_service",
    "init_config_service",
    "ConfigValidator",
    "get_validator",
    "validate_configs_on_startup"
]
