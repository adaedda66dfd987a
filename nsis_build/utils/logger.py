"""
Logger module - Logging configuration and utilities

This module provides logging configuration with support for:
- Console logging (always on)
- Rotating file logging
- Configuration from .env
"""

import logging
import logging.handlers
import sys
import os
from pathlib import Path
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

ROOT_LOGGER_NAME = "nsis_build"

# Flag to track if the package logger has been configured
_logging_initialized = False


def _ensure_logging_initialized() -> None:
    """
    Configure the package root logger from .env settings on first use.
    This is called automatically by get_logger().
    """
    global _logging_initialized

    if _logging_initialized:
        return

    _logging_initialized = True

    from nsis_build.config.env_config import EnvConfig

    EnvConfig.load_env_file()
    configure_logging_from_env()


def configure_logging_from_env(log_level: Optional[str] = None) -> logging.Logger:
    """
    Configure the package root logger from BUILD_LOG_* environment settings.

    Args:
        log_level: Level that takes precedence over BUILD_LOG_LEVEL

    Returns:
        The configured package root logger
    """
    from nsis_build.config.env_config import EnvConfig

    enable_file = EnvConfig.get_bool("BUILD_ENABLE_FILE_LOGGING", False)
    log_folder = EnvConfig.get("BUILD_LOG_FOLDER", "./logs")

    return configure_logging(
        log_level=log_level or EnvConfig.get("BUILD_LOG_LEVEL", "INFO").upper(),
        log_folder=log_folder if enable_file else None,
        max_bytes=EnvConfig.get_int("BUILD_LOG_MAX_BYTES", 10 * 1024 * 1024),  # 10MB
        backup_count=EnvConfig.get_int("BUILD_LOG_BACKUP_COUNT", 5)
    )


def configure_logging(
    log_level: str = "INFO",
    log_folder: Optional[str] = None,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5
) -> logging.Logger:
    """
    Attach console (and optionally rotating file) handlers to the package logger.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_folder: Folder for the log file; file logging is off when None
        max_bytes: Max file size before rotation
        backup_count: Number of rotated files to keep

    Returns:
        The configured package root logger
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)
    root.propagate = False

    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(formatter)
    root.addHandler(console)

    if log_folder:
        Path(log_folder).mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            os.path.join(log_folder, "build.log"),
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    return root


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Get or create a logger under the package root logger.

    Args:
        name: Logger name (typically __name__)
        level: Optional logging level override (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Logger that writes through the package handlers
    """
    _ensure_logging_initialized()

    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"

    logger = logging.getLogger(name)
    if level:
        logger.setLevel(getattr(logging, level.upper()))
    return logger
