"""structlog setup for services embedding the engine."""

import logging
import sys
from typing import Any

import structlog

from eligibility_agents.config import EngineSettings


def configure_logging(settings: EngineSettings) -> None:
    """Configure structlog with the settings' log level.

    Development gets a console renderer; every other environment emits
    JSON lines.
    """
    level = getattr(logging, settings.log_level, logging.INFO)
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if settings.is_development:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    else:
        processors.append(structlog.processors.JSONRenderer())
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        cache_logger_on_first_use=False,
    )
