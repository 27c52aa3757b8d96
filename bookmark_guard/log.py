"""
Logging setup and the labelled log sink.

Components report through ``log(label, message)``; each label maps to its own
child logger (``bookmark_guard.storage``, ``bookmark_guard.guard`` ...), so
hosts can filter categories with the standard logging configuration.
"""

import logging
import sys
from typing import Optional

from .config import ConfigManager, config

LOGGER_NAME = "bookmark_guard"


def setup_logging(config_manager: Optional[ConfigManager] = None):
    """Configure logging for the application."""
    cfg = config_manager or config
    level = getattr(logging, cfg.get("logging.level", "INFO").upper())
    format_str = cfg.get("logging.format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    log_file = cfg.log_filename

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(log_file)
        ]
    )


def log(label: str, message: str) -> None:
    """
    Send a labelled message to the log sink.

    Args:
        label: Category such as "storage", "guard", "event", "init" or "error"
        message: Human readable message
    """
    logger = logging.getLogger(f"{LOGGER_NAME}.{label.lower()}")
    if label.lower() == "error":
        logger.error(message)
    else:
        logger.info(message)
