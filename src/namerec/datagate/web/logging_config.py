"""Logging configuration with structlog and standard logging integration."""

import logging
import sys

import structlog

# Loggers that get the shared handler and do not propagate to root
OWNED_LOGGERS = ['uvicorn', 'uvicorn.access', 'uvicorn.error', 'fastapi', 'namerec.datagate']
# Chatty third-party loggers capped at WARNING unless DEBUG is requested
QUIET_LOGGERS = ['httpx', 'httpcore']


def configure_logging(log_level: str, json_logs: bool = False) -> None:
    """
    Configure structlog with standard logging integration.

    The gateway library logs through the standard library; the web layer
    uses structlog. Both end up on stdout through the same formatter.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Render JSON lines instead of console text
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt='iso', utc=False),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt='iso', utc=False),
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(numeric_level)

    for logger_name in OWNED_LOGGERS:
        logger = logging.getLogger(logger_name)
        logger.handlers = [handler]
        logger.setLevel(numeric_level)
        logger.propagate = False

    quiet_level = numeric_level if numeric_level <= logging.DEBUG else logging.WARNING
    for logger_name in QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(quiet_level)
