"""
Logging configuration
"""
import logging
import sys
from places.config import get_settings

settings = get_settings()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _level() -> int:
    return logging.DEBUG if settings.DEBUG else logging.INFO


def configure_logging() -> None:
    """Route the root logger to stdout; called once from the app lifespan."""
    root = logging.getLogger()
    if not any(getattr(h, "_places", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._places = True
        root.addHandler(handler)
    root.setLevel(_level())
    # aiosqlite logs every cursor operation at DEBUG
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a configured logger instance"""
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False

    logger.setLevel(_level())
    return logger
