"""
Logging handlers for rotating files
"""

from .rotating_handler import RotatingFileHandler
from .utils import create_file_logger

__all__ = [
    "RotatingFileHandler",
    "create_file_logger",
]
