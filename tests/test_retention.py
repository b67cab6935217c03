"""
Tests for the archive retention policy
"""

import os
import shutil
from datetime import datetime, timedelta
from unittest.mock import patch

import pytest

from filerotate.archives import (
    ArchiveFile,
    apply_retention,
    list_archives,
    plan_retention,
)
from filerotate.archives.retention import RetentionPlan

NOW = datetime(2024, 6, 1, 12, 0, 0)
FMT = "%Y-%m-%d_%H-%M-%S.%f"


def _archives(ages, suffix=".log"):
    return [
        ArchiveFile(
            name=f"app-{(NOW - timedelta(days=d)).strftime(FMT)}{suffix}",
            directory="/logs",
            timestamp=NOW - timedelta(days=d),
        )
        for d in ages
    ]


def _ages(archives):
    return [(NOW - a.timestamp).days for a in archives]


class TestPlanRetention:
    def test_age_then_count(self):
        plan = plan_retention(
            _archives([1, 5, 20, 40]),
            max_age=timedelta(days=14),
            max_count=2,
            now=NOW,
        )
        assert _ages(plan.delete) == [20, 40]
        assert plan.compress == []

    def test_count_only_keeps_newest(self):
        plan = plan_retention(_archives([1, 5, 20, 40]), max_count=1, now=NOW)
        assert _ages(plan.delete) == [5, 20, 40]

    def test_count_prunes_only_survivors_of_age_limit(self):
        plan = plan_retention(
            _archives([1, 2, 3, 30]),
            max_age=timedelta(days=14),
            max_count=2,
            now=NOW,
        )
        assert _ages(plan.delete) == [30, 3]

    def test_no_limits_keeps_everything(self):
        plan = plan_retention(_archives([1, 100, 1000]), now=NOW)
        assert plan.delete == []
        assert plan.empty

    def test_zero_age_disables_age_limit(self):
        plan = plan_retention(
            _archives([1, 100]), max_age=timedelta(0), max_count=0, now=NOW
        )
        assert plan.delete == []

    def test_compress_skips_already_compressed(self):
        archives = _archives([1]) + _archives([2], suffix=".log.gz") + _archives([3])
        plan = plan_retention(archives, compress=True, now=NOW)
        assert _ages(plan.compress) == [1, 3]

    def test_deleted_archives_are_not_compressed(self):
        plan = plan_retention(
            _archives([1, 2, 3]), max_count=1, compress=True, now=NOW
        )
        assert _ages(plan.compress) == [1]
        assert _ages(plan.delete) == [2, 3]

    def test_empty_input(self):
        plan = plan_retention([], max_age=timedelta(days=1), max_count=1, now=NOW)
        assert plan.empty


class TestApplyRetention:
    @pytest.fixture(autouse=True)
    def _setup(self, tmp_path):
        self.dir = tmp_path
        self.active = str(tmp_path / "app.log")

    def _make(self, days_old, suffix=".log"):
        stamp = (datetime.now() - timedelta(days=days_old)).strftime(FMT)
        path = self.dir / f"app-{stamp}{suffix}"
        path.write_bytes(b"archived data " * 10)
        return path

    def test_deletes_and_compresses(self):
        young = self._make(1)
        old = self._make(30)

        plan = plan_retention(
            list_archives(self.active, FMT),
            max_age=timedelta(days=14),
            max_count=10,
            compress=True,
        )
        apply_retention(plan)

        assert not old.exists()
        assert not young.exists()
        assert os.path.exists(str(young) + ".gz")

    def test_missing_files_are_skipped(self):
        ghost = ArchiveFile(
            name="app-2024-01-01_00-00-00.000000.log",
            directory=str(self.dir),
            timestamp=datetime(2024, 1, 1),
        )
        apply_retention(RetentionPlan(delete=[ghost], compress=[ghost]))

    def test_idempotent(self):
        self._make(1)
        self._make(2)
        for _ in range(2):
            plan = plan_retention(
                list_archives(self.active, FMT), max_count=1, compress=True
            )
            apply_retention(plan)

        names = sorted(os.listdir(self.dir))
        assert len(names) == 1
        assert names[0].endswith(".log.gz")

    def test_failure_does_not_stop_other_actions(self):
        first = self._make(1)
        second = self._make(2)
        third = self._make(3)
        archives = list_archives(self.active, FMT)

        real_remove = os.remove

        def flaky_remove(path):
            if path == str(second):
                raise PermissionError(13, "denied", path)
            return real_remove(path)

        with patch("filerotate.archives.retention.os.remove", side_effect=flaky_remove):
            with pytest.raises(PermissionError):
                apply_retention(RetentionPlan(delete=archives))

        assert not first.exists()
        assert second.exists()
        assert not third.exists()

    def test_last_error_wins(self):
        archives = [
            ArchiveFile(name=f"app-{i}.log", directory=str(self.dir), timestamp=NOW)
            for i in range(3)
        ]
        errors = [OSError(1, "first"), OSError(2, "second"), OSError(3, "third")]

        with patch("filerotate.archives.retention.os.remove", side_effect=errors):
            with pytest.raises(OSError) as exc_info:
                apply_retention(RetentionPlan(delete=archives))

        assert exc_info.value.errno == 3

    def test_overlapping_passes(self):
        keep = self._make(1)
        drop = self._make(2)
        plan = plan_retention(
            list_archives(self.active, FMT), max_count=1, compress=True
        )

        real_copy = shutil.copyfileobj
        started = []

        def copy_with_second_pass(f_in, f_out):
            if not started:
                started.append(True)
                apply_retention(plan)
            real_copy(f_in, f_out)

        with patch(
            "filerotate.archives.compression.shutil.copyfileobj",
            side_effect=copy_with_second_pass,
        ):
            apply_retention(plan)

        assert not drop.exists()
        assert not keep.exists()
        assert sorted(os.listdir(self.dir)) == [keep.name + ".gz"]
