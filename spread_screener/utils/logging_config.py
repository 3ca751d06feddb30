"""Logging configuration for the spread screener.

Provides structured logging with configurable levels and outputs.
"""

import logging
import sys
from typing import Optional
from pathlib import Path

ROOT_LOGGER_NAME = "spread_screener"


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    log_format: Optional[str] = None,
) -> logging.Logger:
    """Configure structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file. If None, logs only to console.
        log_format: Optional custom log format string

    Returns:
        Configured logger instance

    Example:
        >>> logger = setup_logging(log_level="DEBUG", log_file="scan.log")
        >>> logger.info("Scanning %d legs", 42)
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, log_level.upper()))

    # Clear any existing handlers to avoid duplicates
    logger.handlers.clear()

    if log_format is None:
        log_format = '%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s'

    formatter = logging.Formatter(log_format, datefmt='%Y-%m-%d %H:%M:%S')

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, mode='a')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # Prevent propagation to root logger
    logger.propagate = False

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger instance under the screener hierarchy.

    Args:
        name: Optional logger name. If None, returns the root screener logger.

    Returns:
        Logger instance

    Example:
        >>> logger = get_logger("ranker")
        >>> logger.debug("Dropped %s: ratio %.2f", "Bull Call Spread", 4.2)
    """
    if name:
        return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
    return logging.getLogger(ROOT_LOGGER_NAME)
