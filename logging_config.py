"""
Logging Configuration

Centralized logging configuration for orbit_tracker scripts.

Library modules log through the standard library (logging.getLogger(__name__)).
Scripts call configure_logging() once; records from both stdlib and
structlog loggers are then rendered by structlog, as console text or as
JSON lines.

Usage:
    from logging_config import get_logger, configure_logging

    configure_logging()
    logger = get_logger(__name__)
    logger.info("Satellite propagated", norad_id=25544)
    logger.warning("TLE checksum mismatch", line=1)
"""

import logging
import sys
from typing import Optional

import structlog

from orbit_tracker.config import TrackerConfig

DATE_FORMAT = "iso"

SHARED_PROCESSORS = [
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt=DATE_FORMAT),
]


def configure_logging(level: int = logging.INFO, log_file: Optional[str] = None,
                      json_format: bool = False) -> None:
    """
    Configure logging for the entire application.

    Parameters
    ----------
    level : int
        Logging level (e.g., logging.DEBUG, logging.INFO)
    log_file : str, optional
        Path to log file. If None, logs only to console.
    json_format : bool
        Render records as JSON lines instead of console text
    """
    if json_format:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=SHARED_PROCESSORS,
    )

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers, force=True)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *SHARED_PROCESSORS,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_from_config(config: TrackerConfig, log_file: Optional[str] = None) -> None:
    """Configure logging from ORBIT_TRACKER_* settings."""
    level = logging.getLevelName(config.log_level)
    if not isinstance(level, int):
        level = logging.INFO
    configure_logging(level=level, log_file=log_file, json_format=config.log_json)


def get_logger(name: str):
    """
    Get a structlog logger bound to a stdlib logger name.

    Parameters
    ----------
    name : str
        Name of the logger (typically __name__)

    Returns
    -------
    structlog.stdlib.BoundLogger
        Configured logger instance
    """
    return structlog.get_logger(name)
