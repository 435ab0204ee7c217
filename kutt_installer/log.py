# Path and File Name : /home/kutt/kutt-installer/kutt_installer/log.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Logging setup for all entry points - console plus persistent install log

"""
Logging setup for the installer entry points.

Every run logs to the console and appends to a persistent log file so an
operator can review what a past install or teardown did.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

LOGGER_NAME = "kutt_installer"
FILE_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
CONSOLE_FORMAT = '[%(levelname)s]  %(message)s'


def setup_logging(log_file: Optional[Path] = None, verbose: bool = False) -> logging.Logger:
    """
    Configure logging to console and (when writable) to log_file.

    Args:
        log_file: Persistent log path. Skipped with a warning if it cannot be opened.
        verbose: Show DEBUG records (external command lines) on the console.

    Returns:
        The package root logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    # Re-running setup (tests, nested entry points) must not stack handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.DEBUG if verbose else logging.INFO)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        try:
            log_file = Path(log_file)
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
            logger.addHandler(file_handler)
        except OSError as e:
            logger.warning(f"Cannot write install log {log_file}: {e}")

    return logger
