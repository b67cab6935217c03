"""
Append-only file writer with size and schedule based rotation
"""

import logging
import os
import threading
from concurrent import futures
from concurrent.futures import Future, ThreadPoolExecutor
from typing import BinaryIO, Optional, Set

from .archives import apply_retention, archive_name, list_archives, plan_retention
from .config import ResolvedConfig, RotateConfig
from .exceptions import OversizedWriteError, RotationError
from .scheduler import Scheduler, ThreadScheduler

logger = logging.getLogger(__name__)

DEFAULT_FILE_MODE = 0o644
DEFAULT_DIR_MODE = 0o755


class RotatingWriter:
    """
    Byte sink that rotates its file by size and/or on a wall-clock schedule

    The active file is opened lazily on the first write. When the next write
    would push it past ``rotate_size`` the file is renamed to
    ``<prefix>-<timestamp><ext>`` and a fresh one is created. After every
    rotation a retention pass runs in the background to delete archives
    that are too old or too many and to gzip the survivors.

    ``write``, ``rotate`` and ``close`` are serialized by one lock; the
    retention pass is not and runs alongside later writes.
    """

    def __init__(
        self,
        config: Optional[RotateConfig] = None,
        scheduler: Optional[Scheduler] = None,
    ):
        self.config: ResolvedConfig = (config or RotateConfig()).resolve()

        self._file: Optional[BinaryIO] = None
        self._size = 0
        self._lock = threading.Lock()

        self._executor: Optional[ThreadPoolExecutor] = ThreadPoolExecutor(
            max_workers=self.config.retention_workers,
            thread_name_prefix="filerotate-retention",
        )
        self._pending: Set[Future] = set()
        self._pending_lock = threading.Lock()

        self.scheduler: Optional[Scheduler] = None
        self._owns_scheduler = False
        if self.config.cron:
            if scheduler is None:
                scheduler = ThreadScheduler()
                self._owns_scheduler = True
            self.scheduler = scheduler
            self.scheduler.schedule(self.config.cron, self.rotate)

    @property
    def filename(self) -> str:
        return self.config.filename

    @property
    def size(self) -> int:
        """Bytes currently tracked in the active file"""
        return self._size

    @property
    def closed(self) -> bool:
        return self._file is None

    def write(self, data: bytes) -> int:
        """
        Append ``data`` to the active file, rotating first if it would overflow

        Returns:
            Number of bytes written

        Raises:
            OversizedWriteError: if ``data`` alone is larger than rotate_size
            OSError: if the file cannot be opened, rotated or written
        """
        length = len(data)
        with self._lock:
            if self._should_rotate(length):
                raise OversizedWriteError(length, self.config.rotate_size)
            if self._file is None:
                self._open_file(length)
            if self._should_rotate(self._size + length):
                self._rotate()
            written = self._file.write(data)
            self._size += written
            return written

    def rotate(self) -> None:
        """Archive the active file and start a new one"""
        with self._lock:
            self._rotate()

    def close(self) -> None:
        """Close the active file; the next write reopens it"""
        with self._lock:
            self._close()

    def shutdown(self, wait: bool = True) -> None:
        """Close the file, stop an owned scheduler and the retention executor"""
        if self.scheduler is not None and self._owns_scheduler:
            self.scheduler.stop()
        with self._lock:
            self._close()
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=wait)

    def __enter__(self) -> "RotatingWriter":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown()

    def _should_rotate(self, size: int) -> bool:
        return 0 < self.config.rotate_size < size

    def _close(self) -> None:
        if self._file is None:
            return
        f, self._file = self._file, None
        f.close()

    def _open_file(self, pending: int) -> None:
        try:
            st = os.stat(self.filename)
        except (FileNotFoundError, NotADirectoryError):
            self._open_new_file()
            return

        if self._should_rotate(st.st_size + pending):
            self._rotate()
            return

        self._file = open(self.filename, "ab", buffering=0)
        self._size = st.st_size

    def _open_new_file(self) -> None:
        directory = os.path.dirname(self.filename)
        if directory:
            try:
                os.makedirs(directory, mode=DEFAULT_DIR_MODE, exist_ok=True)
            except OSError as e:
                raise RotationError(
                    f"can't make directories for new logfile: {e}"
                ) from e

        mode = DEFAULT_FILE_MODE
        try:
            mode = os.stat(self.filename).st_mode & 0o777
        except (FileNotFoundError, NotADirectoryError):
            pass
        else:
            archive = archive_name(self.filename, self.config.archive_time_format)
            try:
                os.rename(self.filename, archive)
            except OSError as e:
                raise RotationError(f"can't archive {archive}: {e}") from e
            logger.info("Archived %s to %s", self.filename, archive)

        try:
            fd = os.open(self.filename, os.O_CREAT | os.O_WRONLY | os.O_TRUNC, mode)
        except OSError as e:
            raise RotationError(f"can't open new logfile {self.filename}: {e}") from e

        self._file = os.fdopen(fd, "wb", buffering=0)
        self._size = 0

    def _rotate(self) -> None:
        self._close()
        self._open_new_file()
        self._submit_retention()

    def _submit_retention(self) -> None:
        if self._executor is None:
            return
        try:
            future = self._executor.submit(self._retention_task)
        except RuntimeError as e:
            # executor already shut down
            logger.debug("Skipping retention for %s: %s", self.filename, e)
            return
        with self._pending_lock:
            self._pending.add(future)
        future.add_done_callback(self._retention_done)

    def _retention_task(self) -> None:
        try:
            self.handle_archives()
        except Exception as e:
            logger.warning("Archive retention for %s failed: %s", self.filename, e)

    def _retention_done(self, future: Future) -> None:
        with self._pending_lock:
            self._pending.discard(future)

    def handle_archives(self) -> None:
        """
        Apply the retention policy to the archives of the active file

        Does nothing unless size or schedule rotation is configured. All
        actions are attempted; the last failure is raised.
        """
        if not self.config.rotation_enabled:
            return

        archives = list_archives(self.filename, self.config.archive_time_format)
        plan = plan_retention(
            archives,
            max_age=self.config.max_archive_age,
            max_count=self.config.max_archives,
            compress=self.config.compress,
        )
        if plan.empty:
            return

        logger.debug(
            "Retention for %s: deleting %d, compressing %d",
            self.filename,
            len(plan.delete),
            len(plan.compress),
        )
        apply_retention(plan, self.config.compression_level)

    def wait_for_retention(self, timeout: Optional[float] = None) -> bool:
        """
        Block until background retention passes submitted so far finish

        Returns:
            True if all of them completed within ``timeout``
        """
        with self._pending_lock:
            pending = list(self._pending)
        if not pending:
            return True
        _, not_done = futures.wait(pending, timeout=timeout)
        return not not_done
