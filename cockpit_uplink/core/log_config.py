#!/usr/bin/env python3

"""
Centralized logging configuration for Cockpit-Uplink.
Sets up the root logger consistently for the whole application.

Part of the Cockpit-Uplink project.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(
        level: int = logging.INFO,
        log_to_file: bool = False,
        log_file_path: Optional[str] = None,
        max_log_files: int = 5,
        max_log_size_mb: int = 10
) -> None:
    """
    Configure logging for the whole application. Replaces any handlers
    already installed on the root logger.

    Args:
        level: Logging level for console and file
        log_to_file: Whether to also write logs to a file
        log_file_path: Path to the log file
        max_log_files: Number of rotated log files to keep
        max_log_size_mb: Maximum size of one log file in MB
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_to_file and log_file_path:
        try:
            log_dir = os.path.dirname(log_file_path)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)

            file_handler = RotatingFileHandler(
                log_file_path,
                maxBytes=max_log_size_mb * 1024 * 1024,
                backupCount=max_log_files
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

            logging.info(f"Logging to file: {log_file_path}")
        except OSError as e:
            logging.error(f"Error setting up file logging: {e}")

    logging.info(f"Logging system initialized: level={logging.getLevelName(level)}")
