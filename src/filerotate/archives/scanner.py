"""
Discovery of the archives that belong to an active file
"""

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from ..exceptions import ArchiveNameError
from .naming import split_filename, time_from_name

logger = logging.getLogger(__name__)

COMPRESS_SUFFIX = ".gz"


@dataclass
class ArchiveFile:
    """An archived predecessor of the active file"""

    name: str
    directory: str
    timestamp: datetime
    size: int = 0
    mode: int = 0o644
    mtime: float = 0.0

    @property
    def path(self) -> str:
        return os.path.join(self.directory, self.name)

    @property
    def compressed(self) -> bool:
        return self.name.endswith(COMPRESS_SUFFIX)


def _match(time_format: str, name: str, prefix: str, ext: str) -> Optional[datetime]:
    for suffix in (ext, ext + COMPRESS_SUFFIX):
        try:
            return time_from_name(time_format, name, prefix, suffix)
        except ArchiveNameError:
            continue
    return None


def list_archives(active_path: str, time_format: str) -> List[ArchiveFile]:
    """
    List archives of ``active_path``, newest first

    Plain and gzip-compressed archives are both returned. Subdirectories and
    files that do not follow the archive naming scheme are skipped.

    Raises:
        OSError: if the directory cannot be read
    """
    directory = os.path.dirname(active_path) or "."
    prefix, ext = split_filename(active_path)
    prefix += "-"

    archives = []
    with os.scandir(directory) as entries:
        for entry in entries:
            if entry.is_dir():
                continue
            timestamp = _match(time_format, entry.name, prefix, ext)
            if timestamp is None:
                continue
            try:
                st = entry.stat()
            except FileNotFoundError:
                # removed by a concurrent retention pass
                continue
            archives.append(
                ArchiveFile(
                    name=entry.name,
                    directory=directory,
                    timestamp=timestamp,
                    size=st.st_size,
                    mode=st.st_mode & 0o777,
                    mtime=st.st_mtime,
                )
            )

    archives.sort(key=lambda a: a.timestamp, reverse=True)
    logger.debug("Found %d archives of %s", len(archives), active_path)
    return archives
