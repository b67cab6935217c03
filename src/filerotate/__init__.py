"""
filerotate

An append-only file writer that rotates its file by size or on a schedule
and keeps a bounded, optionally gzip-compressed set of archives.
"""

__version__ = "0.1.0"

from .archives import (
    COMPRESS_SUFFIX,
    ArchiveFile,
    RetentionPlan,
    apply_retention,
    archive_name,
    compress_file,
    list_archives,
    plan_retention,
    split_filename,
    time_from_name,
)
from .config import (
    DEFAULT_ARCHIVE_TIME_FORMAT,
    DEFAULT_MAX_ARCHIVE_DAYS,
    DEFAULT_MAX_ARCHIVES,
    ResolvedConfig,
    RotateConfig,
    RotatePeriod,
)
from .exceptions import (
    ArchiveNameError,
    CompressionError,
    ConfigError,
    OversizedWriteError,
    RotateError,
    RotationError,
)
from .handlers import RotatingFileHandler, create_file_logger
from .scheduler import CronExpression, Scheduler, ThreadScheduler
from .size import parse_size
from .writer import RotatingWriter

__all__ = [
    # Writer
    "RotatingWriter",
    # Configuration
    "RotateConfig",
    "ResolvedConfig",
    "RotatePeriod",
    "DEFAULT_ARCHIVE_TIME_FORMAT",
    "DEFAULT_MAX_ARCHIVES",
    "DEFAULT_MAX_ARCHIVE_DAYS",
    "parse_size",
    # Archives
    "COMPRESS_SUFFIX",
    "ArchiveFile",
    "RetentionPlan",
    "apply_retention",
    "archive_name",
    "compress_file",
    "list_archives",
    "plan_retention",
    "split_filename",
    "time_from_name",
    # Scheduling
    "CronExpression",
    "Scheduler",
    "ThreadScheduler",
    # Logging integration
    "RotatingFileHandler",
    "create_file_logger",
    # Errors
    "RotateError",
    "ConfigError",
    "OversizedWriteError",
    "RotationError",
    "ArchiveNameError",
    "CompressionError",
]
