"""structlog configuration for the discount service.

Two output modes:
- Human (default): colored console output to stderr
- JSON (LOG_JSON=true): structured JSON lines to stderr
"""

from __future__ import annotations

import logging
import os
import sys

import structlog


def configure_logging(
    *,
    level: str | None = None,
    log_json: bool | None = None,
) -> None:
    """Configure structlog processors and output routing.

    Args:
        level: Log level name; defaults to the LOG_LEVEL env var, then INFO.
        log_json: Use JSON renderer instead of console renderer; defaults to
            the LOG_JSON env var.
    """
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    if log_json is None:
        log_json = os.getenv("LOG_JSON", "false").lower() == "true"

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    renderers: list[structlog.types.Processor]
    if log_json:
        renderers = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderers = [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *renderers,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    for name in ("api", "core", "patterns", "verticals"):
        logging.getLogger(name).setLevel(level)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
