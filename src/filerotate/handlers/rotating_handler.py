"""
logging.Handler that writes through a RotatingWriter
"""

import logging
from typing import Optional

from ..config import RotateConfig
from ..writer import RotatingWriter

# Records from these loggers are dropped: the writer logs while holding its
# own lock, so writing them back through the same writer would deadlock.
_INTERNAL_LOGGER = "filerotate"


class RotatingFileHandler(logging.Handler):
    """
    Rotating file handler backed by a RotatingWriter

    Each formatted record is encoded and written as one line. A record that
    is larger than the rotation size is reported through ``handleError``.
    """

    def __init__(
        self,
        config: Optional[RotateConfig] = None,
        writer: Optional[RotatingWriter] = None,
        encoding: str = "utf-8",
        level: int = logging.NOTSET,
    ):
        super().__init__(level)
        self.writer = writer or RotatingWriter(config)
        self._owns_writer = writer is None
        self.encoding = encoding

    @property
    def base_filename(self) -> str:
        return self.writer.filename

    def filter(self, record: logging.LogRecord):
        name = record.name
        if name == _INTERNAL_LOGGER or name.startswith(_INTERNAL_LOGGER + "."):
            return False
        return super().filter(record)

    def emit(self, record: logging.LogRecord):
        """Emit a log record"""
        try:
            msg = self.format(record)
            self.writer.write((msg + "\n").encode(self.encoding))
        except Exception:
            self.handleError(record)

    def close(self):
        """Close the handler and release the writer if it owns it"""
        self.acquire()
        try:
            if self._owns_writer:
                self.writer.shutdown()
            else:
                self.writer.close()
        finally:
            self.release()
        super().close()
