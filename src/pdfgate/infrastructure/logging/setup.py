"""structlog configuration shared by pdfgate and uvicorn.

Both structlog events and stdlib records (uvicorn, httpx, asyncio) end up in
the same ``ProcessorFormatter``, so one renderer decides console vs. JSON.
"""

from __future__ import annotations

import logging
import logging.config
from typing import Any

import structlog

from pdfgate.infrastructure.config.schema import AppConfig

log = structlog.get_logger(__name__)

# Held at WARNING or stricter whatever the configured level is.
_NOISY_LOGGERS: tuple[str, ...] = ("asyncio", "httpx", "httpcore")


def _drop_color_message(_: Any, __: Any, event_dict: dict[str, Any]) -> dict[str, Any]:
    # uvicorn duplicates the message as "color_message".
    event_dict.pop("color_message", None)
    return event_dict


_SHARED_PROCESSORS: list[Any] = [
    _drop_color_message,
    structlog.contextvars.merge_contextvars,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
]


def _clamped(name: str, level: str) -> str:
    if name in _NOISY_LOGGERS and logging.getLevelName(level) < logging.WARNING:
        return "WARNING"
    return level


def build_logging_config(config: AppConfig) -> dict[str, Any]:
    """Return a ``dictConfig`` mapping usable as uvicorn's ``log_config``."""
    renderer = (
        structlog.processors.JSONRenderer()
        if config.log_format == "json"
        else structlog.dev.ConsoleRenderer()
    )
    level = config.log_level

    loggers: dict[str, Any] = {
        "uvicorn": {"handlers": ["default"], "propagate": False},
        "uvicorn.error": {},
        "uvicorn.access": {"handlers": ["access"], "propagate": False},
    }
    loggers.update({name: {} for name in _NOISY_LOGGERS})
    for name, entry in loggers.items():
        entry["level"] = _clamped(name, level)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "structlog": {
                "()": structlog.stdlib.ProcessorFormatter,
                "foreign_pre_chain": list(_SHARED_PROCESSORS),
                "processors": [
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    renderer,
                ],
            },
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "structlog",
                "stream": "ext://sys.stderr",
            },
            "access": {
                "class": "logging.StreamHandler",
                "formatter": "structlog",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": loggers,
        "root": {"handlers": ["default"], "level": level},
    }


def configure_logging(config: AppConfig) -> dict[str, Any]:
    """Configure structlog and stdlib logging; return the dictConfig used."""
    structlog.configure(
        processors=[
            *_SHARED_PROCESSORS,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    cfg = build_logging_config(config)
    logging.config.dictConfig(cfg)

    log.info("logging_configured", log_format=config.log_format, log_level=config.log_level)
    return cfg
