"""
Gzip compression of archived files
"""

import gzip
import logging
import os
import shutil
import tempfile

from ..exceptions import CompressionError
from .scanner import COMPRESS_SUFFIX

logger = logging.getLogger(__name__)


def compress_file(path: str, compression_level: int = 6) -> str:
    """
    Compress ``path`` into ``path + ".gz"`` and remove the original

    The stream is written to a private temporary file next to ``path`` and
    renamed over the destination once complete, so a ``.gz`` file is never
    observed half written. The destination keeps the permission bits of
    the source. If anything fails before the original is removed, the
    temporary file is deleted and the source is left untouched.

    Several passes may compress the same archive at once: a pass that finds
    the source already removed treats the archive as done.

    Returns:
        Path of the compressed file

    Raises:
        CompressionError: wrapping the underlying OS or zlib error
    """
    dst = path + COMPRESS_SUFFIX

    try:
        f_in = open(path, "rb")
    except OSError as e:
        raise CompressionError(f"failed to open {path}: {e}") from e

    with f_in:
        try:
            mode = os.fstat(f_in.fileno()).st_mode & 0o777
            fd, tmp = tempfile.mkstemp(
                dir=os.path.dirname(path) or ".",
                prefix=f".{os.path.basename(path)}.",
                suffix=".tmp",
            )
        except OSError as e:
            raise CompressionError(f"failed to open {dst}: {e}") from e

        try:
            with os.fdopen(fd, "wb") as raw:
                os.fchmod(raw.fileno(), mode)
                with gzip.GzipFile(
                    filename=os.path.basename(path),
                    mode="wb",
                    compresslevel=compression_level,
                    fileobj=raw,
                ) as f_out:
                    shutil.copyfileobj(f_in, f_out)
            os.replace(tmp, dst)
        except Exception as e:
            _remove_quietly(tmp)
            raise CompressionError(f"failed to compress {path}: {e}") from e

    try:
        os.remove(path)
    except FileNotFoundError:
        logger.debug("%s was already compressed by another pass", path)
        return dst
    except OSError as e:
        _remove_quietly(dst)
        raise CompressionError(f"failed to remove {path}: {e}") from e

    logger.debug("Compressed %s", path)
    return dst


def _remove_quietly(path: str) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Could not remove partial archive %s: %s", path, e)
