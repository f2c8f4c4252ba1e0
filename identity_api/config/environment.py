"""
Environment detection utilities.

This module provides utilities for detecting the current environment
and checking environment-specific requirements.
"""

import logging
import os
import sys
from enum import Enum
from typing import Any, Dict

logger = logging.getLogger(__name__)


class Environment(str, Enum):
    """Supported application environments."""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TEST = "test"


class EnvironmentDetector:
    """Utility class for environment detection and validation."""

    @staticmethod
    def detect_environment() -> Environment:
        """
        Detect the current environment from various sources.

        Detection priority:
        1. API_ENV environment variable
        2. ENV environment variable
        3. ENVIRONMENT environment variable
        4. Check if running in pytest (test environment)
        5. Default to development

        Returns:
            Detected environment
        """
        env_vars = ["API_ENV", "ENV", "ENVIRONMENT"]
        for var in env_vars:
            env_value = os.getenv(var)
            if env_value:
                env_value = env_value.lower().strip()
                try:
                    return Environment(env_value)
                except ValueError:
                    logger.warning(
                        f"Invalid environment value '{env_value}' in {var}",
                        extra={"event_type": "invalid_environment", "variable": var}
                    )

        if "pytest" in sys.modules or "PYTEST_CURRENT_TEST" in os.environ:
            return Environment.TEST

        return Environment.DEVELOPMENT

    @staticmethod
    def is_development() -> bool:
        """Check if running in development environment."""
        return EnvironmentDetector.detect_environment() == Environment.DEVELOPMENT

    @staticmethod
    def is_production() -> bool:
        """Check if running in production environment."""
        return EnvironmentDetector.detect_environment() == Environment.PRODUCTION

    @staticmethod
    def is_testing() -> bool:
        """Check if running in test environment."""
        return EnvironmentDetector.detect_environment() == Environment.TEST

    @staticmethod
    def validate_environment_setup() -> Dict[str, Any]:
        """
        Check environment variables the current environment relies on.

        Returns:
            Dictionary with validation results
        """
        env = EnvironmentDetector.detect_environment()
        results = {
            "environment": env.value,
            "valid": True,
            "warnings": [],
            "errors": [],
        }

        if env == Environment.PRODUCTION:
            debug_mode = os.getenv("API_DEBUG", "false").lower()
            if debug_mode in ("true", "1", "yes"):
                results["errors"].append("Debug mode should be disabled in production")
                results["valid"] = False

            jwt_secret = os.getenv("API_JWT_SECRET", "")
            if len(jwt_secret) < 32:
                results["errors"].append("API_JWT_SECRET must be at least 32 characters in production")
                results["valid"] = False

            if os.getenv("API_ADMIN_PASSWORD"):
                results["warnings"].append("API_ADMIN_PASSWORD is set, remove it once the database is seeded")

        elif env == Environment.DEVELOPMENT:
            if not os.path.exists(".env"):
                results["warnings"].append("No .env file found - using default configuration")

        return results
