"""
Logging configuration helpers and shared logger instances
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any

from config.settings import settings

def setup_logger(name: str = "reviewbot") -> logging.Logger:
    """
    Configure and return a named logger with console and optional file output

    Configuration is loaded from settings (LOG_LEVEL, LOG_TO_FILE, LOG_FILE_*)

    Args:
        name: Logger name (default 'reviewbot')

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        level = getattr(logging, settings.log_level.upper(), logging.INFO)
        logger.setLevel(level)

        formatter = logging.Formatter(
            fmt=settings.log_format,
            datefmt=settings.log_date_format
        )

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        if settings.log_to_file:
            log_path = Path(settings.log_file_path)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.handlers.TimedRotatingFileHandler(
                filename=log_path,
                when=settings.log_file_rotation,
                interval=1,
                backupCount=settings.log_file_retention,
                encoding="utf-8"
            )

            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    logger.propagate = False
    return logger

logger = setup_logger()
business_logger = setup_logger("reviewbot.business")

def log_business_event(action: str, **details: Any) -> None:
    """
    Emit a business-event entry (generation summaries, audit-worthy actions)

    Args:
        action: Short description of what happened
        **details: Key/value context rendered as `key=value` pairs
    """
    rendered = " ".join(f"{key}={value!r}" for key, value in details.items())
    business_logger.info(f"{action} | {rendered}" if rendered else action)
