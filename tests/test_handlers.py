"""
Tests for the logging integration
"""

import logging
import os
import shutil
import tempfile

import pytest

from filerotate.archives import list_archives
from filerotate.config import DEFAULT_ARCHIVE_TIME_FORMAT, RotateConfig
from filerotate.handlers import RotatingFileHandler, create_file_logger
from filerotate.writer import RotatingWriter


def _record(msg, name="test"):
    return logging.LogRecord(
        name=name,
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=None,
    )


class TestRotatingFileHandler:
    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()
        self.log_file = os.path.join(self.temp_dir, "test.log")
        self.config = RotateConfig(filename=self.log_file, rotate_size="1KB")

    def teardown_method(self):
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def test_handler_creation(self):
        handler = RotatingFileHandler(self.config)

        assert handler.base_filename == self.log_file
        assert handler.writer.config.rotate_size == 1024
        assert handler.writer.closed

        handler.close()

    def test_log_writing(self):
        handler = RotatingFileHandler(self.config)
        handler.setFormatter(logging.Formatter("%(message)s"))

        handler.handle(_record("Test message"))
        handler.handle(_record("Grüße"))
        handler.close()

        with open(self.log_file, "r", encoding="utf-8") as f:
            assert f.read() == "Test message\nGrüße\n"

    def test_rotation_on_size(self):
        handler = RotatingFileHandler(self.config)
        handler.setFormatter(logging.Formatter("%(message)s"))

        large_message = "x" * 500
        for i in range(5):
            handler.handle(_record(f"{large_message}_{i}"))
        handler.writer.wait_for_retention(5)
        handler.close()

        archives = list_archives(self.log_file, DEFAULT_ARCHIVE_TIME_FORMAT)
        assert len(archives) >= 1
        assert all(os.path.getsize(a.path) <= 1024 for a in archives)

    def test_oversized_record_goes_to_handle_error(self, monkeypatch):
        handler = RotatingFileHandler(self.config)
        handler.setFormatter(logging.Formatter("%(message)s"))
        errors = []
        monkeypatch.setattr(handler, "handleError", errors.append)

        handler.handle(_record("y" * 2000))
        handler.close()

        assert len(errors) == 1
        assert not os.path.exists(self.log_file)

    def test_internal_records_are_dropped(self):
        handler = RotatingFileHandler(self.config)
        handler.setFormatter(logging.Formatter("%(message)s"))

        handler.handle(_record("internal", name="filerotate.writer"))
        handler.handle(_record("external", name="filerotated"))
        handler.close()

        with open(self.log_file, "r") as f:
            assert f.read() == "external\n"

    def test_shared_writer_is_not_shut_down(self):
        writer = RotatingWriter(self.config)
        handler = RotatingFileHandler(writer=writer)
        handler.setFormatter(logging.Formatter("%(message)s"))
        handler.handle(_record("one"))
        handler.close()

        writer.write(b"two\n")
        writer.shutdown()

        with open(self.log_file, "r") as f:
            assert f.read() == "one\ntwo\n"


class TestCreateFileLogger:
    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()
        self.log_file = os.path.join(self.temp_dir, "logger_test.log")
        self.config = RotateConfig(filename=self.log_file)

    def teardown_method(self):
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def test_create_file_logger(self):
        logger = create_file_logger("filerotate_test_logger", self.config)

        assert isinstance(logger, logging.Logger)
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RotatingFileHandler)

        logger.info("Test message")
        logger.handlers[0].close()

        with open(self.log_file, "r") as f:
            content = f.read()
        assert "Test message" in content
        assert "INFO" in content

    def test_replaces_existing_handlers(self):
        logger = create_file_logger("filerotate_test_replace", self.config)
        first = logger.handlers[0]

        logger = create_file_logger(
            "filerotate_test_replace",
            self.config,
            formatter=logging.Formatter("%(levelname)s:%(message)s"),
        )
        assert len(logger.handlers) == 1
        assert logger.handlers[0] is not first
        assert first.writer.closed

        logger.warning("careful")
        logger.handlers[0].close()
        with open(self.log_file, "r") as f:
            assert f.read().endswith("WARNING:careful\n")

    @pytest.fixture(autouse=True)
    def _cleanup_loggers(self):
        yield
        for name in ("filerotate_test_logger", "filerotate_test_replace"):
            logger = logging.getLogger(name)
            for handler in logger.handlers[:]:
                logger.removeHandler(handler)
                handler.close()
