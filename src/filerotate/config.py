"""
Configuration for rotating file writers
"""

import os
import sys
import tempfile
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Optional, Union

from .exceptions import ConfigError
from .size import parse_size

DEFAULT_ARCHIVE_TIME_FORMAT = "%Y-%m-%d_%H-%M-%S.%f"
DEFAULT_MAX_ARCHIVES = 100
DEFAULT_MAX_ARCHIVE_DAYS = 14


class RotatePeriod(str, Enum):
    """Time based rotation schedules"""

    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @property
    def cron(self) -> str:
        return _PERIOD_CRON[self]


_PERIOD_CRON = {
    RotatePeriod.HOURLY: "0 * * * *",
    RotatePeriod.DAILY: "0 0 * * *",
    RotatePeriod.WEEKLY: "0 0 * * 0",
    RotatePeriod.MONTHLY: "0 0 1 * *",
}


def default_filename() -> str:
    """``<process name>.log`` in the system temp directory"""
    name = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "python"
    return os.path.join(tempfile.gettempdir(), f"{name}.log")


@dataclass(frozen=True)
class ResolvedConfig:
    """Validated configuration with all defaults applied"""

    filename: str
    rotate_size: int = 0
    cron: str = ""
    archive_time_format: str = DEFAULT_ARCHIVE_TIME_FORMAT
    max_archives: int = 0
    max_archive_age: Optional[timedelta] = None
    compress: bool = False
    compression_level: int = 6
    retention_workers: int = 1

    @property
    def rotation_enabled(self) -> bool:
        return self.rotate_size > 0 or bool(self.cron)


@dataclass
class RotateConfig:
    """Configuration for a rotating file writer"""

    # Active file; <process name>.log in the temp dir when empty
    filename: str = ""

    # Rotation triggers
    rotate_period: Optional[Union[RotatePeriod, str]] = None
    rotate_size: str = ""

    # Retention settings, defaulted when a rotation trigger is set
    max_archives: int = 0
    max_archive_days: int = 0
    archive_time_format: str = ""

    # Compression settings
    compress: bool = False
    compression_level: int = 6

    # Background retention threads
    retention_workers: int = 1

    def resolve(self) -> ResolvedConfig:
        """
        Validate the options and apply defaults

        Raises:
            ConfigError: on an invalid size string, period or worker count
        """
        rotate_size = parse_size(self.rotate_size)

        cron = ""
        if self.rotate_period:
            try:
                cron = RotatePeriod(self.rotate_period.strip().lower()).cron
            except ValueError:
                raise ConfigError(
                    f"invalid rotate period {self.rotate_period!r}"
                ) from None

        if not 0 <= self.compression_level <= 9:
            raise ConfigError("compression_level must be between 0 and 9")
        if self.retention_workers <= 0:
            raise ConfigError("retention_workers must be positive")

        time_format = self.archive_time_format
        max_archives = self.max_archives
        max_age = None
        if rotate_size > 0 or cron:
            time_format = time_format or DEFAULT_ARCHIVE_TIME_FORMAT
            if max_archives <= 0:
                max_archives = DEFAULT_MAX_ARCHIVES
            days = self.max_archive_days
            if days <= 0:
                days = DEFAULT_MAX_ARCHIVE_DAYS
            max_age = timedelta(days=days)

        return ResolvedConfig(
            filename=self.filename or default_filename(),
            rotate_size=rotate_size,
            cron=cron,
            archive_time_format=time_format or DEFAULT_ARCHIVE_TIME_FORMAT,
            max_archives=max(max_archives, 0),
            max_archive_age=max_age,
            compress=self.compress,
            compression_level=self.compression_level,
            retention_workers=self.retention_workers,
        )

    @classmethod
    def _parse_bool_env(cls, key: str, default: str = "false") -> bool:
        """Parse boolean from environment variable"""
        return os.getenv(key, default).lower() == "true"

    @classmethod
    def from_env(cls) -> "RotateConfig":
        """Create configuration from FILEROTATE_* environment variables"""
        return cls(
            filename=os.getenv("FILEROTATE_FILE", ""),
            rotate_period=os.getenv("FILEROTATE_PERIOD") or None,
            rotate_size=os.getenv("FILEROTATE_SIZE", ""),
            max_archives=int(os.getenv("FILEROTATE_MAX_ARCHIVES", "0")),
            max_archive_days=int(os.getenv("FILEROTATE_MAX_ARCHIVE_DAYS", "0")),
            archive_time_format=os.getenv("FILEROTATE_TIME_FORMAT", ""),
            compress=cls._parse_bool_env("FILEROTATE_COMPRESS"),
            compression_level=int(os.getenv("FILEROTATE_COMPRESSION_LEVEL", "6")),
        )
