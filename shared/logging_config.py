"""
Centralized logging configuration for the shortenit service.

This module sets up structured logging with:
- Environment-based configuration (dev vs production)
- JSON formatting for production, pretty console for development
- IP hashing for GDPR compliance in production
- Sampling rate configuration for high-frequency events (redirects, geo lookups)
"""

import hashlib
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Optional

import structlog
from structlog.types import EventDict, Processor


# Environment configuration
ENV = os.getenv("ENV", "development")
IS_PRODUCTION = ENV == "production"

# Log level configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO" if IS_PRODUCTION else "DEBUG")
LOG_FORMAT = os.getenv("LOG_FORMAT", "json" if IS_PRODUCTION else "console")

# Sampling rates for high-frequency events
SAMPLING_RATES = {
    "url_redirect": float(os.getenv("SAMPLE_RATE_REDIRECT", "0.05")),  # 5%
    "analytics_query": float(os.getenv("SAMPLE_RATE_ANALYTICS", "0.20")),  # 20%
    "geo_lookup": float(os.getenv("SAMPLE_RATE_GEO", "0.01")),  # 1%
}

# Sensitive fields to redact from logs
REDACTED_FIELDS = {
    "password",
    "token",
    "api_key",
    "authorization",
    "cookie",
    "secret",
}


def hash_ip(ip_address: str) -> str:
    """
    Hash IP address for privacy in production.

    In production, returns SHA-256 hash (first 16 chars) for GDPR compliance.
    In development, returns the original IP for easier debugging.
    """
    if IS_PRODUCTION and ip_address:
        return hashlib.sha256(ip_address.encode()).hexdigest()[:16]
    return ip_address


def add_timestamp(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add ISO format timestamp to event dict."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def redact_sensitive_fields(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Redact sensitive fields from logs."""
    for key in list(event_dict.keys()):
        lowered = key.lower()
        if lowered in REDACTED_FIELDS or any(
            sensitive in lowered for sensitive in ["password", "token", "secret"]
        ):
            if key not in ["level", "event", "timestamp", "logger"]:
                event_dict[key] = "***REDACTED***"
    return event_dict


def configure_structlog(log_format: Optional[str] = None) -> None:
    """
    Configure structlog with appropriate processors for the environment.

    Production: JSON formatting for easy parsing
    Development: Pretty console formatting with colors
    """
    log_format = log_format or LOG_FORMAT

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_timestamp,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        redact_sensitive_fields,
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            pad_event=15,
            sort_keys=False,
        )

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_stdlib_logging(log_level: Optional[str] = None) -> None:
    """
    Configure standard library logging to work with structlog.

    Sets up the log level, a stdout handler and quiets noisy third-party
    loggers (pymongo, httpx).
    """
    level_name = (log_level or LOG_LEVEL).upper()
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level_name, logging.INFO),
    )

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)


def setup_logging(
    log_level: Optional[str] = None, log_format: Optional[str] = None
) -> None:
    """
    Initialize logging system for the application.

    Called at import time with environment defaults and again from
    ``create_app()`` with the values from ``LoggingSettings``.
    """
    configure_stdlib_logging(log_level)
    configure_structlog(log_format)

    logger = structlog.get_logger(__name__)
    logger.debug(
        "logging_initialized",
        env=ENV,
        log_level=log_level or LOG_LEVEL,
        log_format=log_format or LOG_FORMAT,
    )


# Initialize logging when module is imported
setup_logging()
