"""Uvicorn logging configuration sharing the application's structlog renderer."""

import logging

import structlog

from .settings import settings

# Library loggers kept quiet unless they warn
QUIET_LOGGERS = ("httpx", "httpcore")


def build_renderer():
    """Final structlog processor for the configured LOG_FORMAT / LOG_COLORS."""
    if settings.log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=settings.log_colors)


def level_value(name: str) -> int:
    return getattr(logging, str(name).upper(), logging.INFO)


class RenameLoggerProcessor:
    """Give uvicorn's loggers names that say what they log."""

    RENAMES = {"uvicorn.error": "uvicorn.server", "uvicorn.access": "uvicorn.http"}

    def __call__(self, logger, name, event_dict):
        current = event_dict.get("logger")
        if current in self.RENAMES:
            event_dict["logger"] = self.RENAMES[current]
        return event_dict


def get_logging_config() -> dict:
    """dictConfig for ``uvicorn.run(log_config=...)``."""
    uvicorn_level = level_value(settings.uvicorn_log_level)

    def route(level) -> dict:
        return {"handlers": ["default"], "level": level, "propagate": False}

    loggers = {
        name: route(uvicorn_level)
        for name in ("uvicorn", "uvicorn.access", "uvicorn.error")
    }
    loggers.update({name: route("WARNING") for name in QUIET_LOGGERS})

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "()": structlog.stdlib.ProcessorFormatter,
                "processor": build_renderer(),
                "foreign_pre_chain": [
                    structlog.stdlib.add_logger_name,
                    structlog.stdlib.add_log_level,
                    RenameLoggerProcessor(),
                    structlog.stdlib.PositionalArgumentsFormatter(),
                    structlog.processors.TimeStamper(fmt="iso"),
                ],
            },
        },
        "handlers": {
            "default": {
                "formatter": "default",
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": loggers,
    }
