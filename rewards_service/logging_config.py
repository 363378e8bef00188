"""
logging_config.py — Centralized Logging Configuration for the Rewards Service

This module configures unified logging behavior for the entire application.
It ensures that all modules log messages consistently to the console and,
when enabled, to a log file.

Features:
    • Combined console and optional file logging output
    • Process ID tagging for multi-process visibility
    • Standardized log format for all modules
    • Reduced verbosity for external dependencies (e.g., httpx, uvicorn access log)
"""

import logging
import sys

from . import config


def setup_logging(level=None, log_file=None):
    """
    Configures the global logging system for the application.

    The configuration includes:
        - Log level: taken from `LOG_LEVEL` (default INFO) unless overridden
        - Log format: timestamp, log level, process ID, and message
        - Output destinations:
            1. Console (stdout): real-time logs, Docker/Kubernetes compatible
            2. File: `LOG_FILE` (persistent log), skipped when empty
        - Reduced verbosity for third-party libraries such as httpx

    Args:
        level (str | int, optional): Overrides the configured log level.
        log_file (str, optional): Overrides the configured log file path.
    """
    log_format = '%(asctime)s - %(levelname)s - [PID:%(process)d] - %(name)s - %(message)s'

    handlers = [logging.StreamHandler(sys.stdout)]
    log_file = config.LOG_FILE if log_file is None else log_file
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level or config.LOG_LEVEL,
        format=log_format,
        handlers=handlers,
        force=True,
    )

    # Reduce verbosity from external libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name):
    """
    Returns a configured logger instance for a given module or component name.

    Args:
        name (str): The logger name, typically the module's __name__.

    Returns:
        logging.Logger: A logger that follows the global format and handlers.

    Notes:
        - Every module of the package obtains its logger through this function
          rather than calling `logging.getLogger()` directly.
    """
    return logging.getLogger(name)
