"""Tests for mac_cleanup.utils.disk."""
import os
import tempfile
import time
import unittest
from contextlib import nullcontext
from unittest import mock

from mac_cleanup.utils import disk
from mac_cleanup.utils.disk import DiskInfo, human_size, size_of, size_of_aged

DAY = 86400


def _write(path: str, size: int, age_days: float = 0, now: float = 0) -> str:
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as f:
        f.write(b"x" * size)
    if age_days:
        ts = now - age_days * DAY
        os.utime(path, (ts, ts))
    return path


def _age(path: str, age_days: float, now: float) -> None:
    ts = now - age_days * DAY
    os.utime(path, (ts, ts))


class TestSizeOf(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = self._tmp.name

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_file_size(self) -> None:
        p = _write(os.path.join(self.root, "a.bin"), 123)
        self.assertEqual(size_of(p), 123)

    def test_recursive_directory(self) -> None:
        _write(os.path.join(self.root, "d", "a"), 100)
        _write(os.path.join(self.root, "d", "sub", "b"), 200)
        _write(os.path.join(self.root, "d", "sub", "deeper", "c"), 300)
        self.assertEqual(size_of(os.path.join(self.root, "d")), 600)

    def test_missing_path_is_zero(self) -> None:
        self.assertEqual(size_of(os.path.join(self.root, "nope")), 0)

    def test_symlinked_directory_not_followed(self) -> None:
        _write(os.path.join(self.root, "big", "blob"), 10_000)
        os.makedirs(os.path.join(self.root, "d"))
        os.symlink(os.path.join(self.root, "big"), os.path.join(self.root, "d", "link"))
        self.assertLess(size_of(os.path.join(self.root, "d")), 10_000)

    def test_symlink_loop_terminates(self) -> None:
        d = os.path.join(self.root, "loop")
        os.makedirs(d)
        os.symlink(d, os.path.join(d, "self"))
        _write(os.path.join(d, "f"), 10)
        self.assertGreaterEqual(size_of(d), 10)

    def test_unlistable_subtree_counts_zero(self) -> None:
        d = os.path.join(self.root, "d")
        locked = os.path.join(d, "locked")
        _write(os.path.join(d, "a"), 100)
        _write(os.path.join(d, "sub", "b"), 200)
        _write(os.path.join(locked, "secret"), 5000)
        real_scandir = os.scandir

        def scandir(path):
            if path == locked:
                raise PermissionError(13, "Permission denied", path)
            return real_scandir(path)

        with mock.patch.object(disk.os, "scandir", side_effect=scandir):
            self.assertEqual(size_of(d), 300)

    def test_unreadable_entry_counts_zero(self) -> None:
        d = os.path.join(self.root, "d")
        _write(os.path.join(d, "a"), 100)
        _write(os.path.join(d, "sub", "b"), 200)
        real_scandir = os.scandir
        broken = mock.Mock()
        broken.is_dir.return_value = False
        broken.stat.side_effect = PermissionError(13, "Permission denied")

        def scandir(path):
            with real_scandir(path) as it:
                entries = list(it)
            if path == d:
                entries.insert(0, broken)
            return nullcontext(entries)

        with mock.patch.object(disk.os, "scandir", side_effect=scandir):
            self.assertEqual(size_of(d), 300)
        broken.stat.assert_called_once()


class TestSizeOfAged(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = self._tmp.name
        self.now = time.time()

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_matches_sum_of_qualifying_children(self) -> None:
        _write(os.path.join(self.root, "old.txt"), 100, 10, self.now)
        _write(os.path.join(self.root, "new.txt"), 200, 1, self.now)
        _write(os.path.join(self.root, ".hidden"), 400, 50, self.now)
        _write(os.path.join(self.root, "olddir", "inner.bin"), 800, 1, self.now)
        _age(os.path.join(self.root, "olddir"), 20, self.now)

        expected = size_of(os.path.join(self.root, "old.txt")) + size_of(os.path.join(self.root, "olddir"))
        self.assertEqual(size_of_aged(self.root, 7, now=self.now), expected)
        self.assertEqual(expected, 900)

    def test_whole_subtree_counted_for_old_directory(self) -> None:
        # fresh files inside an old directory still count
        _write(os.path.join(self.root, "cache", "a"), 50, 0, self.now)
        _write(os.path.join(self.root, "cache", "b", "c"), 70, 0, self.now)
        _age(os.path.join(self.root, "cache"), 30, self.now)
        self.assertEqual(size_of_aged(self.root, 7, now=self.now), 120)

    def test_missing_directory_is_zero(self) -> None:
        self.assertEqual(size_of_aged(os.path.join(self.root, "missing"), 1), 0)


class TestHelpers(unittest.TestCase):
    def test_human_size(self) -> None:
        self.assertEqual(human_size(100), "100.0 B")
        self.assertEqual(human_size(2048), "2.0 KB")
        self.assertEqual(human_size(5 * 1024**3), "5.0 GB")

    def test_disk_info_after_freeing(self) -> None:
        disk = DiskInfo(total=1000, used=600, available=400)
        self.assertAlmostEqual(disk.percent_used, 60.0)
        after = disk.after_freeing(100)
        self.assertEqual(after.available, 500)
        self.assertAlmostEqual(after.percent_used, 50.0)
        self.assertEqual(DiskInfo().percent_used, 0.0)
