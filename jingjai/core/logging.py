"""
Centralized Logging Configuration
"""
import logging
from typing import Optional

from jingjai.core.config import settings


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Configure the root logger with a console handler.

    Args:
        level: Log level name, defaults to settings.LOG_LEVEL

    Returns:
        The configured root logger
    """
    log_level = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Clear existing handlers so repeated app construction doesn't duplicate output
    root_logger.handlers = []

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(settings.LOG_FORMAT))
    root_logger.addHandler(console_handler)

    # Quieten chatty third-party loggers
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    root_logger.debug("Logging initialized at %s level", logging.getLevelName(log_level))
    return root_logger
