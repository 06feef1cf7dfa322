"""Central logging configuration for the survey service.

Installs a single stdout handler on the root logger so every module logger
(`logging.getLogger(__name__)`) emits records without per-module setup.
Service events are logged as short names (`response.submitted`,
`survey.created`) with their context passed through `extra`; the event
formatter appends that context as `key=value` pairs so it survives the
plain-text output. Uvicorn loggers are routed through the same handler.
"""
from __future__ import annotations
import logging
import os
from logging.config import dictConfig

# Context keys the service passes via `extra`, in output order
EVENT_FIELDS = (
    "survey_id",
    "response_id",
    "questions",
    "answers",
    "items",
    "total_score",
    "reason",
    "code",
    "path",
)


class EventFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = [f"{key}={getattr(record, key)}" for key in EVENT_FIELDS if hasattr(record, key)]
        if context:
            line = f"{line} {' '.join(context)}"
        return line


def _dict_config(level: str) -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "event": {
                "()": EventFormatter,
                "format": "%(asctime)s %(levelname)s:%(name)s:%(message)s",
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": "DEBUG",
                "formatter": "event",
                "stream": "ext://sys.stdout",
            }
        },
        "root": {"level": "INFO", "handlers": ["console"]},
        "loggers": {
            "survey_tool": {"level": level},
            "uvicorn": {"level": "INFO", "handlers": ["console"], "propagate": False},
            "uvicorn.error": {"level": "INFO", "handlers": ["console"], "propagate": False},
            "uvicorn.access": {"level": "INFO", "handlers": ["console"], "propagate": False},
            "sqlalchemy.engine": {"level": "WARNING"},
        },
    }


def configure_logging() -> None:
    """Configure application-wide logging once.

    `LOG_LEVEL` sets the level of the `survey_tool` loggers (default INFO;
    DEBUG also shows visibility computations). Returns early when the root
    logger already has handlers (reloaders, pytest's log capture) to avoid
    duplicate output.
    """
    root = logging.getLogger()
    if root.handlers:
        return
    level = os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"
    if not isinstance(logging.getLevelName(level), int):
        level = "INFO"
    dictConfig(_dict_config(level))


__all__ = ["EVENT_FIELDS", "EventFormatter", "configure_logging"]
