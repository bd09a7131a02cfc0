"""Structured logging setup using structlog.

One shared processor chain (context vars, level, stack info, exc info,
timestamps) ends in either a coloured ConsoleRenderer for development or a
JSONRenderer for production.  ``APP_ENV=production`` or ``json_output=True``
selects JSON.

Stdlib ``logging`` goes through the same chain, so records from the vendor
SDKs look like vecbox's own events.  Those SDKs log every HTTP request at
INFO; they are held at WARNING unless vecbox itself runs at DEBUG.

Library modules never call :func:`configure_logging`; they use
``structlog.get_logger(logger_name=__name__)`` and leave configuration to
the application (or to the CLI).
"""

import logging
import os
import sys
from typing import TextIO

import structlog

_VENDOR_LOGGERS = ("httpx", "httpcore", "openai")


def configure_logging(
    log_level: str = "INFO",
    json_output: bool = False,
    stream: TextIO | None = None,
) -> structlog.BoundLogger:
    """Configure structlog and stdlib logging.

    Args:
        log_level: DEBUG, INFO, WARNING or ERROR (case-insensitive).
        json_output: Force JSON rendering regardless of ``APP_ENV``.
        stream: Where log lines go; defaults to stdout.  The CLI passes
                stderr so that stdout carries only results.

    Returns:
        A configured structlog BoundLogger.
    """
    level = logging.getLevelName(log_level.upper())
    use_json = json_output or os.environ.get("APP_ENV", "development") == "production"
    stream = stream or sys.stdout

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if use_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=stream.isatty())

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *shared_processors,
                renderer,
            ],
        )
    )
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    vendor_level = level if level <= logging.DEBUG else max(level, logging.WARNING)
    for name in _VENDOR_LOGGERS:
        logging.getLogger(name).setLevel(vendor_level)

    return structlog.get_logger()


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a named structlog logger, configuring from ``LOG_LEVEL`` on first use."""
    if not structlog.is_configured():
        configure_logging(log_level=os.environ.get("LOG_LEVEL", "INFO"))

    return structlog.get_logger(logger_name=name)
