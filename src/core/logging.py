"""
Structured logging configuration using structlog.

Development renders colored console lines; production renders JSON so
per-rule and per-item failures (``rule_id=...``, ``content_id=...``)
stay queryable.

Usage:
    from core.logging import configure_logging, get_logger

    configure_logging(json_logs=False)  # Development
    configure_logging(json_logs=True)   # Production

    logger = get_logger(__name__)
    logger.warning("Adaptation rule failed", rule_id="morning-energy-adaptation")
"""

import logging
import sys
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import structlog
from structlog.types import Processor


def configure_logging(
    json_logs: bool = False,
    log_level: str = "INFO",
    include_timestamp: bool = True,
) -> None:
    """
    Configure structured logging for the application.

    Args:
        json_logs: If True, output JSON format (for production).
                   If False, output colored console format (for development).
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        include_timestamp: Whether to include timestamp in logs
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        shared_processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_logs:
        shared_processors.append(structlog.processors.format_exc_info)
        shared_processors.append(structlog.processors.JSONRenderer())
    else:
        shared_processors.append(structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
        ))

    structlog.configure(
        processors=shared_processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
        force=True,
    )

    # supabase-py talks through httpx
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def configure_from_settings(settings: Any = None) -> None:
    """Configure logging from :class:`config.settings.Settings`."""
    if settings is None:
        from config.settings import get_settings
        settings = get_settings()
    configure_logging(
        json_logs=settings.json_logs or settings.is_production,
        log_level=settings.log_level,
    )


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__). If None, returns root logger.
    """
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """
    Bind context variables to all subsequent logs in the current context.

    Usage:
        bind_context(user_id="123")
        logger.info("Scoring")  # Will include user_id
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()


def unbind_context(*keys: str) -> None:
    """Unbind specific context variables."""
    structlog.contextvars.unbind_contextvars(*keys)


@contextmanager
def log_context(**kwargs: Any) -> Iterator[None]:
    """Bind ``kwargs`` for the duration of a ``with`` block."""
    bind_context(**kwargs)
    try:
        yield
    finally:
        unbind_context(*kwargs.keys())


class LoggerMixin:
    """
    Mixin class that provides a logger property.

    Usage:
        class MyService(LoggerMixin):
            def process(self):
                self.logger.info("Processing")
    """

    @property
    def logger(self) -> structlog.stdlib.BoundLogger:
        return get_logger(self.__class__.__name__)
