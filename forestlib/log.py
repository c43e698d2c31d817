"""Project-wide logging helpers."""

import logging
from typing import Optional

from .config import log_level_from_env

ROOT_LOGGER = "forestlib"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the forestlib namespace."""
    logger_name = ROOT_LOGGER if name is None else f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(logger_name)


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Attach a stream handler to the forestlib logger exactly once.

    Args:
        level: Level name; defaults to FORESTLIB_LOG_LEVEL (or WARNING)

    Returns:
        The configured root forestlib logger
    """
    level = (level or log_level_from_env()).upper()
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
    return logger
