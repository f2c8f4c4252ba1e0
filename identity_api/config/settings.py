"""
Configuration management using Dynaconf.

This module provides centralized configuration management with support for:
- Environment-specific settings (``[development]``, ``[test]``... sections)
- ``API_`` prefixed environment variables and a ``.env`` file
- Configuration validation
"""

import os
import re
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict

from dynaconf import Dynaconf, Validator

from .environment import EnvironmentDetector

# Get the project root directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Configuration file paths
CONFIG_DIR = PROJECT_ROOT / "config"
SETTINGS_FILES = [
    CONFIG_DIR / "settings.toml",
]

PLACEHOLDER_SECRET = "change-me-to-a-random-secret-of-32-chars-or-more"

DURATION_PATTERN = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
DURATION_UNITS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400}


def get_environment() -> str:
    """
    Detect the current environment using the EnvironmentDetector.

    Returns:
        Current environment name
    """
    return EnvironmentDetector.detect_environment().value


def parse_duration(value: Any) -> timedelta:
    """
    Parse a token lifetime such as ``7d``, ``12h``, ``30m``, ``45s`` or ``3600``.

    Args:
        value: Duration string or number of seconds

    Returns:
        Parsed duration

    Raises:
        ValueError: If the value is not a positive duration
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")
    if isinstance(value, int):
        seconds = value
    else:
        match = DURATION_PATTERN.match(str(value))
        if not match:
            raise ValueError(f"Invalid duration: {value!r}")
        seconds = int(match.group(1)) * DURATION_UNITS[match.group(2)]
    if seconds <= 0:
        raise ValueError(f"Duration must be positive: {value!r}")
    return timedelta(seconds=seconds)


def _is_duration(value: Any) -> bool:
    try:
        parse_duration(value)
    except ValueError:
        return False
    return True


# Dynaconf settings instance
settings = Dynaconf(
    # Environment settings
    envvar_prefix="API",
    environments=True,
    env=get_environment(),

    # Configuration files
    settings_files=SETTINGS_FILES,

    # Secrets file (optional, for sensitive data)
    secrets=CONFIG_DIR / ".secrets.toml",

    # Environment variables
    load_dotenv=True,
    dotenv_path=PROJECT_ROOT / ".env",

    # Validation
    validators=[
        # Application settings
        Validator("app_name", default="identity-api", is_type_of=str),
        Validator("version", default="0.1.0", is_type_of=str),
        Validator("debug", default=False, is_type_of=bool),

        # Server settings
        Validator("host", default="127.0.0.1", is_type_of=str),
        Validator("port", default=8000, is_type_of=int, gte=1, lte=65535),

        # Database settings
        Validator("database_url", default="sqlite+aiosqlite:///./identity.db", is_type_of=str),
        Validator("database_echo", default=False, is_type_of=bool),

        # Token settings
        Validator("jwt_secret", must_exist=True, is_type_of=str, len_min=32),
        Validator("jwt_algorithm", default="HS256", is_in=["HS256", "HS384", "HS512"]),
        Validator(
            "jwt_expires_in",
            default="7d",
            condition=_is_duration,
            messages={"condition": "jwt_expires_in must look like 7d, 12h, 30m, 45s or a number of seconds"},
        ),

        # Password hashing
        Validator("bcrypt_rounds", default=10, is_type_of=int, gte=4, lte=31),

        # Registration
        Validator("default_role_name", default="USER", is_type_of=str),

        # Logging settings
        Validator("log_level", default="INFO", is_in=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
        Validator("log_format", default="json", is_in=["json", "console"]),

        # Seeding
        Validator("allow_prod_seed", default=False, is_type_of=bool),
    ]
)


class ConfigurationError(Exception):
    """Raised when configuration validation fails."""
    pass


def validate_configuration() -> None:
    """
    Validate the current configuration.

    Raises:
        ConfigurationError: If configuration validation fails.
    """
    try:
        settings.validators.validate()
    except Exception as e:
        raise ConfigurationError(f"Configuration validation failed: {str(e)}") from e

    if get_environment() == "production":
        if settings.debug:
            raise ConfigurationError("Debug mode should be disabled in production")
        if settings.jwt_secret == PLACEHOLDER_SECRET:
            raise ConfigurationError("Default JWT secret detected in production")


def is_development() -> bool:
    """Check if running in development environment."""
    return get_environment() == "development"


def is_production() -> bool:
    """Check if running in production environment."""
    return get_environment() == "production"


def is_testing() -> bool:
    """Check if running in test environment."""
    return get_environment() == "test"


def get_database_url() -> str:
    """Database URL for the current environment."""
    return settings.database_url


def get_jwt_config() -> Dict[str, Any]:
    """
    Get JWT configuration as a dictionary.

    Returns:
        JWT configuration dictionary
    """
    return {
        "secret_key": settings.jwt_secret,
        "algorithm": settings.jwt_algorithm,
        "expires_in": parse_duration(settings.jwt_expires_in),
    }


def get_logging_config() -> Dict[str, Any]:
    """
    Get logging configuration as a dictionary.

    Returns:
        Logging configuration dictionary
    """
    return {
        "level": settings.log_level,
        "format": settings.log_format,
    }


# Validate configuration on import (can be disabled for testing)
if not os.getenv("SKIP_CONFIG_VALIDATION"):
    validate_configuration()
