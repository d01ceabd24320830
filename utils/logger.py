"""
Logging Setup
Configures loguru sinks for the deployment entry points
"""

import sys
from typing import Optional
from loguru import logger


CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}"


def setup_logging(level: str = "INFO", log_file: Optional[str] = None):
    """
    Replace the default loguru sink with the console format
    and optionally add a rotating file sink

    Args:
        level: Console log level
        log_file: Path of the debug log file (None = console only)
    """
    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level.upper())

    if log_file:
        logger.add(
            log_file,
            rotation="1 day",
            retention="7 days",
            format=FILE_FORMAT,
            level="DEBUG"
        )
