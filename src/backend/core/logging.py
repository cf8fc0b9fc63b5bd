"""
Structured logging setup.

Routes both structlog and the standard library logger through one
configuration so SQLAlchemy and uvicorn output share the same format.
"""

import logging
import sys

import structlog

from core.config import settings

_configured = False


def configure_logging(level: str | None = None, json_logs: bool | None = None) -> None:
    """Configure structlog once per process."""
    global _configured
    if _configured:
        return

    log_level = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)
    use_json = settings.LOG_JSON if json_logs is None else json_logs

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)

    renderer: structlog.types.Processor
    if use_json and not settings.DEBUG:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configured = True
