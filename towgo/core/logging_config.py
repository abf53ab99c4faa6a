"""
Logging Configuration Module.

This module provides centralized logging configuration for the TowGo API.
It sets up console (and optionally file) logging with per-module levels so the
noisy third-party libraries stay quiet while the search and payment flows can
be traced in detail.

Features:
- Configurable log levels per module
- Console and file logging
- simple, detailed and JSON line formats
"""

import logging
import os
from pathlib import Path
from typing import Optional

from towgo.server.core.config import settings

LOG_LEVEL = settings.log_level.upper()
LOG_FORMAT = os.getenv("TOWGO_LOG_FORMAT", "detailed")
LOG_FILE_DIR = os.getenv("TOWGO_LOG_FILE_DIR", "logs")
ENABLE_FILE_LOGGING = os.getenv("TOWGO_ENABLE_FILE_LOGGING", "false").lower() in ("true", "1", "yes")


# Define log formats
SIMPLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"

DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(funcName)s() - %(message)s"

JSON_FORMAT = (
    '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
    '"module": "%(filename)s", "function": "%(funcName)s", "line": %(lineno)d, '
    '"message": "%(message)s"}'
)

FORMATS = {
    "simple": SIMPLE_FORMAT,
    "detailed": DETAILED_FORMAT,
    "json": JSON_FORMAT,
}


# Module-specific log levels
MODULE_LOG_LEVELS = {
    # Server modules
    "towgo.server": "INFO",
    "towgo.server.api": "DEBUG",
    "towgo.server.services": "DEBUG",
    "towgo.server.core": "INFO",
    # Persistence
    "towgo.core.database": "INFO",
    # Outbound integrations
    "towgo.integrations": "INFO",
    "towgo.integrations.perplexity": "DEBUG",
    "towgo.integrations.websearch": "DEBUG",
    "towgo.integrations.stripe": "INFO",
    # Third-party libraries (reduce noise)
    "sqlalchemy": "WARNING",
    "sqlalchemy.engine": "WARNING",
    "sqlalchemy.pool": "WARNING",
    "httpx": "WARNING",
    "httpcore": "WARNING",
    "asyncio": "WARNING",
    "passlib": "ERROR",
    "uvicorn": "INFO",
    "uvicorn.access": "INFO",
}


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    enable_file: bool = ENABLE_FILE_LOGGING,
) -> None:
    """
    Configure logging for the application.

    Args:
        log_level: Override default log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Override default format (simple, detailed, json)
        enable_file: Whether to also write DEBUG output to ``<LOG_FILE_DIR>/towgo.log``
    """
    level = (log_level or LOG_LEVEL).upper()
    fmt = log_format or LOG_FORMAT
    formatter = logging.Formatter(FORMATS.get(fmt, DETAILED_FORMAT), datefmt="%Y-%m-%d %H:%M:%S")

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture all levels, filter at handler level

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if enable_file:
        Path(LOG_FILE_DIR).mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(Path(LOG_FILE_DIR) / "towgo.log")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    for module_name, module_level in MODULE_LOG_LEVELS.items():
        logging.getLogger(module_name).setLevel(module_level)

    root_logger.info(f"Logging configured: level={level}, format={fmt}, file_logging={enable_file}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The module name (typically __name__)

    Returns:
        A configured logger instance
    """
    return logging.getLogger(name)
