"""Logging configuration using structlog.

Events are snake_case names with key/value context, e.g.
``log.info("pipeline_completed", view="default", ranked=5)``.
"""

import logging
import sys

import structlog

from deployerhunter.config.settings import get_settings

# Per-request chatter from these libraries drowns out pipeline events
NOISY_LOGGERS = ("httpx", "httpcore", "gradio", "uvicorn.access")


def configure_logging(level: str | None = None) -> None:
    """Configure structlog and stdlib logging for the application.

    Args:
        level: Override of ``settings.log_level`` (e.g. "DEBUG").
    """
    settings = get_settings()
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            # JSON lines in production, pretty console output in debug
            structlog.dev.ConsoleRenderer()
            if settings.debug
            else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        service=settings.app_name,
        version=settings.app_version,
        token_source=settings.token_source,
    )
