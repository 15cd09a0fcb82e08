import logging
import sys

import structlog

from .config import LogFormat, settings


def configure_logging() -> None:
    """
    Configures structlog to emit structured JSON logs or colored
    console logs, depending on ``settings.LOG_FORMAT``.

    Logs go to stderr so CLI output on stdout stays clean.
    """

    # 1. Processor chain
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    # 2. Output format
    if settings.LOG_FORMAT == LogFormat.JSON:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    # 3. Level filtering
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.WARNING)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
