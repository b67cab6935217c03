"""
Archive file naming: ``<dir>/<prefix>-<timestamp><ext>``
"""

import os
from datetime import datetime
from typing import Optional, Tuple

from ..exceptions import ArchiveNameError


def split_filename(path: str) -> Tuple[str, str]:
    """Split the basename of ``path`` into (prefix, extension)"""
    prefix, ext = os.path.splitext(os.path.basename(path))
    return prefix, ext


def archive_name(
    active_path: str, time_format: str, now: Optional[datetime] = None
) -> str:
    """Return the path an active file is renamed to when it is archived"""
    directory = os.path.dirname(active_path)
    prefix, ext = split_filename(active_path)
    stamp = (now or datetime.now()).strftime(time_format)
    return os.path.join(directory, f"{prefix}-{stamp}{ext}")


def time_from_name(
    time_format: str, filename: str, prefix: str, ext: str
) -> datetime:
    """
    Parse the timestamp embedded in an archive file name

    ``prefix`` must already include the trailing hyphen.

    Raises:
        ArchiveNameError: if ``filename`` is not ``prefix + timestamp + ext``
    """
    if not filename.startswith(prefix):
        raise ArchiveNameError(f"mismatched prefix: {filename}")
    if not filename.endswith(ext):
        raise ArchiveNameError(f"mismatched extension: {filename}")

    end = len(filename) - len(ext)
    if end < len(prefix):
        raise ArchiveNameError(f"prefix and extension overlap: {filename}")

    stamp = filename[len(prefix):end]
    try:
        return datetime.strptime(stamp, time_format)
    except ValueError as e:
        raise ArchiveNameError(f"bad timestamp in {filename}: {e}") from e
