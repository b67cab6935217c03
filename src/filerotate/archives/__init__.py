"""
Archive discovery, retention and compression
"""

from .compression import compress_file
from .naming import archive_name, split_filename, time_from_name
from .retention import RetentionPlan, apply_retention, plan_retention
from .scanner import COMPRESS_SUFFIX, ArchiveFile, list_archives

__all__ = [
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
]
