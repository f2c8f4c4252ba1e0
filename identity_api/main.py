"""
Main application entry point.

Runs the application under uvicorn:

    python -m identity_api.main
"""

import logging
import sys

import uvicorn

from identity_api.app import get_application
from identity_api.config import EnvironmentDetector, settings, is_development

logger = logging.getLogger(__name__)


def create_uvicorn_config() -> dict:
    """
    Create uvicorn server configuration based on environment settings.

    Returns:
        Dictionary with uvicorn configuration
    """
    return {
        "host": settings.get("host", "127.0.0.1"),
        "port": settings.get("port", 8000),
        "log_level": settings.log_level.lower(),
        "access_log": is_development(),
        "use_colors": is_development(),
        # configure_structlog owns the root logger
        "log_config": None,
    }


def check_environment() -> bool:
    """
    Log environment warnings and errors before the server starts.

    Returns:
        True when the environment has no blocking errors
    """
    validation = EnvironmentDetector.validate_environment_setup()

    for warning in validation["warnings"]:
        logger.warning(warning, extra={"event_type": "environment_warning"})
    for error in validation["errors"]:
        logger.error(error, extra={"event_type": "environment_error"})

    return validation["valid"]


def main() -> None:
    """Main entry point for the application."""
    if not check_environment():
        sys.exit(1)

    config = create_uvicorn_config()
    try:
        uvicorn.run(get_application(), **config)
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")
    except Exception as e:
        logger.error(f"Application error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
