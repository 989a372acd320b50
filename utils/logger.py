import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

API_LOGGER_NAME = 'trip_planner.api'


def setup_api_logger(log_path: Optional[str] = None, level: str = 'INFO') -> logging.Logger:
    """Setup and return the application-wide API logger.

    Always logs to the console; when `log_path` is given, also writes to a
    rotating file at that location.
    """
    logger = logging.getLogger(API_LOGGER_NAME)
    logger.setLevel(level.upper())

    formatter = logging.Formatter('%(asctime)s [%(levelname)s] %(name)s: %(message)s')

    # avoid adding multiple handlers if called multiple times
    if not any(type(h) is logging.StreamHandler for h in logger.handlers):
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(formatter)
        logger.addHandler(console)

    if log_path and not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        handler = RotatingFileHandler(log_path, maxBytes=5 * 1024 * 1024, backupCount=5, encoding='utf-8')
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
