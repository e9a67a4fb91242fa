"""
logging.py — Console logging for the events backend.

One format for every module (timestamp | level | module | message), level
taken from settings.LOG_LEVEL unless given. User service code logs ids and
outcomes only; passwords and hashes are never passed to a logger.
"""

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure the root logger. Call once, from `app.main`, before routers run.
    """
    if level is None:
        from app.core.config import settings
        level = settings.LOG_LEVEL

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT
    )
    logging.getLogger(__name__).info("Logging initialized with level %s", level)


def get_logger(name: str) -> logging.Logger:
    """Module logger; use as `logger = get_logger(__name__)`."""
    return logging.getLogger(name)
