"""
Structured logging for event_kit.

Loggers are bound to stdlib ``logging``. Lifecycle events are DEBUG and stay
silent until the host application configures a handler; routed handler
failures are ERROR. ``configure_logging`` installs a handler.
"""

import logging
import os
import sys
from typing import Optional

import structlog

PACKAGE_LOGGER = "event_kit"

_processors = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
]


def get_logger(name: str):
    """Return a structlog logger writing to the stdlib logger ``name``."""
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=_processors,
        wrapper_class=structlog.stdlib.BoundLogger,
    )


def configure_logging(
    level: Optional[str] = None,
    json_logs: Optional[bool] = None,
) -> logging.Handler:
    """
    Attach a structlog-rendering handler to the ``event_kit`` logger.

    ``level`` defaults to ``EVENT_KIT_LOG_LEVEL`` (or WARNING) and
    ``json_logs`` to ``EVENT_KIT_JSON_LOGS``. Calling it again replaces the
    previously installed handler. Returns the new handler.
    """
    if level is None:
        level = os.getenv("EVENT_KIT_LOG_LEVEL", "WARNING")
    if json_logs is None:
        json_logs = bool(os.getenv("EVENT_KIT_JSON_LOGS", ""))

    final_processor = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    formatter = structlog.stdlib.ProcessorFormatter(
        processor=final_processor,
        foreign_pre_chain=[
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    # Records stop here so a configured root logger doesn't print them twice
    logger.propagate = False
    return handler
