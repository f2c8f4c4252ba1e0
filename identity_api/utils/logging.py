"""
Structured logging utilities for the application.

This module wires stdlib ``logging`` records (including their ``extra``
fields) and structlog loggers through one processor chain with
correlation ID support and sensitive data masking.
"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import structlog
from structlog.types import EventDict, Processor

from identity_api.config.settings import get_environment, get_logging_config, settings


class CorrelationIDProcessor:
    """
    Processor to add correlation ID to log entries.

    This processor extracts correlation ID from context variables
    and adds it to every log entry.
    """

    def __call__(self, logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
        correlation_id = event_dict.get("correlation_id")

        if not correlation_id:
            correlation_id = structlog.contextvars.get_contextvars().get("correlation_id")

        if correlation_id:
            event_dict["correlation_id"] = correlation_id

        return event_dict


class SensitiveDataProcessor:
    """
    Processor to mask sensitive data in log entries.

    Passwords, hashes, tokens and secrets must never reach log output.
    """

    def __init__(self):
        """Initialize sensitive data processor."""
        self.sensitive_keys = {
            "password",
            "passwd",
            "secret",
            "token",
            "authorization",
            "api_key",
            "jwt",
            "bearer",
            "cookie",
            "hash",
        }

        self.mask_value = "***MASKED***"

    def __call__(self, logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
        """
        Process log entry and mask sensitive data.

        Args:
            logger: Logger instance
            method_name: Log method name
            event_dict: Log event dictionary

        Returns:
            Updated event dictionary with masked sensitive data
        """
        return self._mask_dict(event_dict)

    def _mask_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        masked_data = {}

        for key, value in data.items():
            if self._is_sensitive_key(key):
                masked_data[key] = self.mask_value
            elif isinstance(value, dict):
                masked_data[key] = self._mask_dict(value)
            elif isinstance(value, list):
                masked_data[key] = self._mask_list(value)
            else:
                masked_data[key] = value

        return masked_data

    def _mask_list(self, data: list) -> list:
        masked_list = []

        for item in data:
            if isinstance(item, dict):
                masked_list.append(self._mask_dict(item))
            elif isinstance(item, list):
                masked_list.append(self._mask_list(item))
            else:
                masked_list.append(item)

        return masked_list

    def _is_sensitive_key(self, key: Any) -> bool:
        key_lower = str(key).lower()
        return any(sensitive in key_lower for sensitive in self.sensitive_keys)


class ServiceInfoProcessor:
    """
    Processor to add service information to log entries.
    """

    def __init__(self):
        """Initialize service info processor."""
        self.service_info = {
            "service": settings.get("app_name", "identity-api"),
            "version": settings.get("version", "0.1.0"),
            "environment": get_environment(),
        }

    def __call__(self, logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.update(self.service_info)
        return event_dict


def add_timestamp(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add an ISO-8601 UTC timestamp."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _shared_processors() -> List[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        ServiceInfoProcessor(),
        CorrelationIDProcessor(),
        add_timestamp,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        SensitiveDataProcessor(),
    ]


def configure_structlog(log_level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Configure structlog and route stdlib logging through it.

    Args:
        log_level: Overrides ``settings.log_level``
        log_format: ``json`` or ``console``, overrides ``settings.log_format``
    """
    config = get_logging_config()
    level_name = (log_level or config["level"]).upper()
    output_format = log_format or config["format"]

    if output_format == "console":
        renderer: Processor = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    else:
        renderer = structlog.processors.JSONRenderer()

    shared = _shared_processors()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        # stdlib records: copy their ``extra`` fields into the event dict first
        foreign_pre_chain=[structlog.stdlib.ExtraAdder(), *shared],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(getattr(logging, level_name, logging.INFO))


def set_correlation_id(correlation_id: str) -> None:
    """Bind a correlation ID to the current context."""
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)


def clear_correlation_id() -> None:
    """Clear correlation ID from structlog context."""
    structlog.contextvars.unbind_contextvars("correlation_id")
