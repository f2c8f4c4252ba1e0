"""
Configuration management module.

Usage:
    from identity_api.config import settings

    secret = settings.jwt_secret

    from identity_api.config import get_jwt_config, is_production
"""

from .settings import (
    settings,
    ConfigurationError,
    validate_configuration,
    get_database_url,
    get_jwt_config,
    get_logging_config,
    parse_duration,
    is_development,
    is_production,
    is_testing,
)

from .environment import (
    Environment,
    EnvironmentDetector,
)

__all__ = [
    "settings",
    "ConfigurationError",
    "validate_configuration",
    "get_database_url",
    "get_jwt_config",
    "get_logging_config",
    "parse_duration",
    "is_development",
    "is_production",
    "is_testing",
    "Environment",
    "EnvironmentDetector",
]
