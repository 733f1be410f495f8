"""
Logging configuration module.

This module provides centralized logging setup for the application,
configuring both file and console output with appropriate formatting.
"""

import logging
from config.settings import Settings


def setup_logger() -> None:
    """
    Configure and initialize the application logger.

    Sets up dual logging output (file and console), creates the logs
    directory if needed, and configures third-party library log levels
    to reduce verbosity.

    The function configures:
        - File logging to Settings.LOG_FILE with UTF-8 encoding
          (skipped when Settings.LOG_TO_FILE is off)
        - Console logging to stderr
        - Custom formatter with timestamp, logger name, level, and message
        - Reduced verbosity for aiohttp, aiocron and asyncio

    Args:
        None

    Returns:
        None

    Raises:
        OSError: If logs directory cannot be created (rare, usually permissions issue)

    Example:
        >>> setup_logger()
        >>> logging.info("Application started")
        2025-11-11 14:30:00 - root - INFO - Application started

    Note:
        - Existing handlers are cleared before setup to avoid duplicates
        - Root level comes from Settings.LOG_LEVEL (default INFO)
    """
    level = getattr(logging, Settings.LOG_LEVEL, logging.INFO)

    # Clear any existing handlers to prevent duplicates on re-initialization
    logging.root.handlers.clear()

    # Create formatter with timestamp, logger name, level, and message
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    if Settings.LOG_TO_FILE:
        Settings.LOGS_DIR.mkdir(parents=True, exist_ok=True)

        # Handler for file output (UTF-8 encoding for international characters)
        file_handler = logging.FileHandler(Settings.LOG_FILE, encoding='utf-8')
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        root_logger.addHandler(file_handler)

    # Handler for console output
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)

    # Reduce verbosity of third-party libraries to avoid log spam
    logging.getLogger('aiohttp').setLevel(logging.WARNING)
    logging.getLogger('aiocron').setLevel(logging.WARNING)
    logging.getLogger('asyncio').setLevel(logging.INFO)
