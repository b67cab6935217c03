"""
Retention policy for archives: age limit, count limit and compression
"""

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional, Sequence

from .compression import compress_file
from .scanner import ArchiveFile

logger = logging.getLogger(__name__)


@dataclass
class RetentionPlan:
    """Archives to delete and archives to compress"""

    delete: List[ArchiveFile] = field(default_factory=list)
    compress: List[ArchiveFile] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not self.delete and not self.compress


def plan_retention(
    archives: Sequence[ArchiveFile],
    max_age: Optional[timedelta] = None,
    max_count: int = 0,
    compress: bool = False,
    now: Optional[datetime] = None,
) -> RetentionPlan:
    """
    Decide which archives to delete and which to compress

    ``archives`` must be ordered newest first. Age eviction runs before the
    count limit, so the count limit only prunes archives that are young
    enough to keep. A ``max_age`` of None/zero or a ``max_count`` of 0
    disables that limit.
    """
    plan = RetentionPlan()
    keep = list(archives)

    if max_age:
        cutoff = (now or datetime.now()) - max_age
        keep = []
        for archive in archives:
            if archive.timestamp < cutoff:
                plan.delete.append(archive)
            else:
                keep.append(archive)

    if max_count > 0 and len(keep) > max_count:
        plan.delete.extend(keep[max_count:])
        keep = keep[:max_count]

    if compress:
        plan.compress = [a for a in keep if not a.compressed]

    return plan


def apply_retention(plan: RetentionPlan, compression_level: int = 6) -> None:
    """
    Execute a retention plan

    Every deletion and compression is attempted even if an earlier one
    fails. Only the last failure is raised; earlier ones are logged at
    debug level and otherwise dropped.
    """
    last_error: Optional[Exception] = None

    for archive in plan.delete:
        try:
            os.remove(archive.path)
            logger.debug("Removed archive %s", archive.path)
        except FileNotFoundError:
            continue
        except OSError as e:
            logger.debug("Failed to remove archive %s: %s", archive.path, e)
            last_error = e

    for archive in plan.compress:
        if not os.path.exists(archive.path):
            continue
        try:
            compress_file(archive.path, compression_level)
        except OSError as e:
            logger.debug("Failed to compress archive %s: %s", archive.path, e)
            last_error = e

    if last_error is not None:
        raise last_error
