"""Structured logging configuration with structlog.

Every event carries the service name, environment and version, and
credential-bearing keys are masked before rendering.
"""

import logging
from collections.abc import MutableMapping
from typing import Any

import structlog

from skillpath.config import Settings

SERVICE_NAME = "skillpath-api"
REDACTED = "[redacted]"
SENSITIVE_KEYS = frozenset({"password", "password_hash", "access_token", "token", "authorization"})


def service_context(settings: Settings) -> structlog.types.Processor:
    """Processor stamping service/environment/version onto each event."""
    static = {
        "service": SERVICE_NAME,
        "environment": settings.environment,
        "version": settings.app_version,
    }

    def add_service_context(
        _logger: Any, _method: str, event_dict: MutableMapping[str, Any]  # noqa: ANN401
    ) -> MutableMapping[str, Any]:
        for key, value in static.items():
            event_dict.setdefault(key, value)
        return event_dict

    return add_service_context


def redact_sensitive(
    _logger: Any, _method: str, event_dict: MutableMapping[str, Any]  # noqa: ANN401
) -> MutableMapping[str, Any]:
    for key in SENSITIVE_KEYS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


def setup_logging(settings: Settings) -> None:
    """Configure structlog for JSON or console output."""
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer() if settings.log_format == "json" else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            service_context(settings),
            redact_sensitive,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
    # SQLAlchemy echoes through the stdlib logger; quiet unless debugging.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if settings.debug else logging.WARNING)
