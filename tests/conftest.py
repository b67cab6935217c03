import itertools
from datetime import datetime, timedelta
from unittest.mock import patch

import pytest

from filerotate.archives import naming


class FakeScheduler:
    """Records scheduled jobs and fires them on demand"""

    def __init__(self):
        self.jobs = []
        self.stopped = False

    def schedule(self, expression, callback):
        self.jobs.append((expression, callback))

    def stop(self):
        self.stopped = True

    def fire(self):
        for _, callback in self.jobs:
            callback()


@pytest.fixture
def fake_scheduler():
    return FakeScheduler()


@pytest.fixture
def ticking_archive_clock():
    """Give every archive name a distinct timestamp, one second apart"""
    start = datetime.now().replace(microsecond=0)
    ticks = (start + timedelta(seconds=i) for i in itertools.count())
    real_archive_name = naming.archive_name

    def archive_name(path, time_format, now=None):
        return real_archive_name(path, time_format, now=next(ticks))

    with patch("filerotate.writer.archive_name", side_effect=archive_name):
        yield
