"""Structured logging for the chat relay using structlog."""

import logging

import structlog
from structlog.types import FilteringBoundLogger

from chatrelay.config.logging_config import QUIET_LOGGERS, build_renderer, level_value
from chatrelay.config.settings import settings


def configure_structlog():
    """Configure structlog with pretty or JSON output per `settings.log_format`.

    stdlib logging is routed through structlog so uvicorn and httpx records share
    the same renderer and level handling.
    """
    renderer = build_renderer()

    # Root logger + handler with ProcessorFormatter
    logging.root.handlers = []
    handler = logging.StreamHandler()
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=[
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
            ],
        )
    )
    logging.root.addHandler(handler)
    logging.root.setLevel(level_value(settings.log_level))

    # Capture warnings to logging
    logging.captureWarnings(True)

    # Library log levels (inherited fmt via ProcessorFormatter)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    # structlog pipeline; wrap_for_formatter hands off to ProcessorFormatter above
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


# Configure structlog on module import
configure_structlog()


# Helper functions for special log types
def request_log(
    logger: FilteringBoundLogger,
    method: str,
    path: str,
    status_code: int,
    duration_ms: float,
    **kwargs,
):
    """Log HTTP request with details."""
    logger.info(
        f"{method} {path} - {status_code}",
        method=method,
        path=path,
        status_code=status_code,
        duration_ms=duration_ms,
        **kwargs,
    )


def stream_log(
    logger: FilteringBoundLogger, event_type: str, content: str | None = None, **kwargs
):
    """Log SSE streaming events."""
    logger.debug(
        f"SSE Event: {event_type}",
        event_type=event_type,
        content=content[:300] if content else None,  # Truncate long content
        **kwargs,
    )


def get_logger(name: str, level: int | None = None) -> FilteringBoundLogger:
    """Get a configured structlog logger."""
    if level is not None:
        logging.getLogger(name).setLevel(level)
    return structlog.get_logger(name)


# Global logger instances
logger = get_logger("chatrelay")
api_logger = get_logger("chatrelay.api")
llm_logger = get_logger("chatrelay.llm")
client_logger = get_logger("chatrelay.client")
