import logging
import sys

import structlog
from structlog.stdlib import LoggerFactory


def _configure_structlog():
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def configure_default_logging():
    """
    Route structlog through stdlib logging unless the application already
    configured structlog. Without handlers, stdlib only reports warnings and
    above on stderr, so library use stays silent on stdout.
    """
    if structlog.is_configured():
        return
    _configure_structlog()


def configure_logging(log_level="WARNING"):
    """Configure structured logging"""
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, log_level.upper(), logging.WARNING),
        stream=sys.stderr,  # Keep stdout for trace output
        force=True,  # Override any root logger config
    )
    _configure_structlog()
    logger = structlog.get_logger()
    logger.debug("Logging configured", log_level=log_level)
