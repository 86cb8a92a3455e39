"""Logging configuration for credhash."""

import os
import logging
from datetime import datetime
from typing import Optional

from credhash import __version__


def setup_logging(level: str = "INFO", path: Optional[str] = None):
    """Configure and return the credhash logger.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR)
        path: Directory for log files, or None to log to the console only
    """
    logger = logging.getLogger("credhash")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if path:
        os.makedirs(path, exist_ok=True)
        log_file = os.path.join(
            path,
            f"credhash({__version__})_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
        )
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
        logger.debug(f"Log file created: {log_file}")

    return logger
