"""Logfire setup and the span/log helpers used by the service layer.

Modules log through `logging.getLogger(__name__)`; once `configure_logfire`
has run, Logfire picks those records up alongside the service spans.
"""

import logging

import logfire
from fastapi import FastAPI

from taskclock.core.config import settings


logger = logging.getLogger(__name__)


def configure_logfire() -> None:
    """Configure Logfire for the current environment.

    Records are only shipped when LOGFIRE_TOKEN is set. Production keeps
    console output off.
    """
    logfire.configure(
        token=settings.logfire_token,
        service_name="taskclock",
        service_version="0.1.0",
        environment=settings.environment,
        send_to_logfire="if-token-present",
        console=False if settings.is_production else None,
    )
    logger.info("Logfire configured for %s", settings.environment)


def instrument_fastapi(app: FastAPI) -> None:
    logfire.instrument_fastapi(app)
    logger.info("FastAPI instrumentation configured")


def span(name: str) -> logfire.LogfireSpan:
    """Span named `<module>.<operation>`, e.g. "time_entry_service.stop_time_entry"."""
    return logfire.span(name)


def log_event(logger: logging.Logger, level: str, message: str, **context: object) -> None:
    """Log `message` with the non-None context fields attached as `extra`."""
    extra = {key: value for key, value in context.items() if value is not None}
    getattr(logger, level.lower())(message, extra=extra)
