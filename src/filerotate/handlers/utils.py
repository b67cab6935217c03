"""
Helpers for wiring rotating files into stdlib logging
"""

import logging
from typing import Optional

from ..config import RotateConfig
from .rotating_handler import RotatingFileHandler

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def create_file_logger(
    name: str,
    config: Optional[RotateConfig] = None,
    formatter: Optional[logging.Formatter] = None,
    level: int = logging.DEBUG,
) -> logging.Logger:
    """
    Point logger ``name`` at a rotating file, dropping its previous handlers

    Old handlers are closed so their writers release the file.
    """
    logger = logging.getLogger(name)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    handler = RotatingFileHandler(config)
    handler.setFormatter(
        formatter or logging.Formatter(fmt=DEFAULT_FORMAT, datefmt=DEFAULT_DATEFMT)
    )
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
