"""
logging_config.py — Centralized Logging Configuration for the Order Console

This module configures unified logging behavior for the entire application.
It ensures that all modules log messages consistently to both console and file.

Features:
    • Combined console and file logging output
    • Process ID tagging for multi-process visibility
    • Standardized log format for all modules
    • Reduced verbosity for the HTTP client stack (httpx, httpcore)
"""

import logging
import sys

from . import config


def setup_logging(log_file: str = None, level: str = None):
    """
    Configures the global logging system for the application.

    The configuration includes:
        - Log level: taken from CONSOLE_LOG_LEVEL (INFO by default)
        - Log format: timestamp, log level, process ID, and message
        - Output destinations:
            1. File: CONSOLE_LOG_FILE (persistent audit trail of commits and status changes)
            2. Console (stdout): real-time logs, Docker/Kubernetes compatible
        - Reduced verbosity for httpx/httpcore, which log every request at INFO

    Args:
        log_file (str, optional): Overrides the configured log file path.
        level (str, optional): Overrides the configured log level name.
    """
    log_format = '%(asctime)s - %(levelname)s - [PID:%(process)d] - %(message)s'

    logging.basicConfig(
        level=getattr(logging, (level or config.LOG_LEVEL).upper(), logging.INFO),
        format=log_format,
        handlers=[
            logging.FileHandler(log_file or config.LOG_FILE),
            logging.StreamHandler(sys.stdout)
        ]
    )

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name):
    """
    Returns a logger instance for a given module or component name.

    Args:
        name (str): The logger name, typically the module's __name__.

    Returns:
        logging.Logger: A logger that follows the global format and handlers.
    """
    return logging.getLogger(name)
