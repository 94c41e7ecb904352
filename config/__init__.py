"""
Application configuration package
"""

from .settings import Settings, settings
from .logging_config import logger, business_logger, setup_logger, log_business_event

__all__ = [
    "Settings",
    "settings",
    "logger",
    "business_logger",
    "setup_logger",
    "log_business_event",
]
