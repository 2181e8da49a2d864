# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Logging setup for the scheduling API.

Service modules log through ``logging.getLogger(__name__)``. The root
handler renders those records with structlog, so fields bound with
``bind_context`` (the authenticated user, set by AuthMiddleware) appear on
every line of the request. Development output is a console renderer;
everything else is one JSON object per line.
"""

import logging
import sys
from typing import TYPE_CHECKING

import structlog
from structlog.types import Processor

if TYPE_CHECKING:
    from coursesched.core.config.settings import Settings

# Loggers that are noisy at INFO and only interesting when something breaks
QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "aiosqlite", "asyncio")


def build_formatter(json_output: bool) -> structlog.stdlib.ProcessorFormatter:
    """Build the formatter used for all stdlib records.

    Args:
        json_output: Render JSON instead of console text.
    """
    processors: list[Processor] = [
        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
    ]
    if json_output:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.ExtraAdder(),
            structlog.processors.TimeStamper(fmt="iso", utc=True),
        ],
        processors=processors,
    )


def setup_logging(settings: "Settings") -> None:
    """Route application logging through structlog.

    Safe to call more than once; the root handler is replaced each time.

    Args:
        settings: Application settings (log level, environment, debug flag).
    """
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    json_output = not (settings.is_development or settings.debug)
    handler.setFormatter(build_formatter(json_output))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def bind_context(**fields: object) -> None:
    """Attach fields to every log line of the current request."""
    structlog.contextvars.bind_contextvars(**fields)


def clear_context() -> None:
    """Drop fields bound for the current request."""
    structlog.contextvars.clear_contextvars()
