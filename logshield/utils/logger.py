"""
Logging setup (loguru)
"""
import os
import sys
from loguru import logger

from config.settings import get_settings

def setup_logger():
    """Configure console and file sinks."""
    settings = get_settings()
    logger.remove()

    # console
    logger.add(
        sys.stdout,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
        level=settings.LOG_LEVEL
    )

    # file
    if settings.LOG_TO_FILE:
        logger.add(
            os.path.join(settings.LOG_DIR, "logshield_{time}.log"),
            rotation="500 MB",
            retention="10 days",
            level=settings.LOG_LEVEL
        )

    return logger

# shared logger instance
log = setup_logger()
