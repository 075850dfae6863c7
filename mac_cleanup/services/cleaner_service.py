"""Cleanup logic: remove qualifying entries and account for what was freed."""
from __future__ import annotations

import os
import shutil
from typing import Iterable, Optional, Tuple

from ..core.models import CleanupStats, ExecutionMode, FilesystemEntry, RetentionRule
from ..utils.disk import qualifying_children, size_of
from ..utils.reporter import NullReporter, Reporter


class FilesystemRemover:
    """Removal primitive. Each call reports success; it never raises OSError."""

    def remove_file(self, path: str) -> bool:
        try:
            os.remove(path)
        except OSError:
            # includes FileNotFoundError: someone else got there first
            return False
        return True

    def remove_tree(self, path: str) -> bool:
        """Recursive delete. False unless the whole tree is gone."""
        if not os.path.lexists(path):
            return False
        failures = []

        def _onexc(func, p, exc):
            if not isinstance(exc, FileNotFoundError):
                failures.append(p)

        shutil.rmtree(path, onexc=_onexc)
        return not failures and not os.path.lexists(path)

    def remove(self, entry: FilesystemEntry) -> bool:
        if entry.is_directory and not entry.is_symlink:
            return self.remove_tree(entry.path)
        return self.remove_file(entry.path)


def _entry_size(entry: FilesystemEntry) -> int:
    if entry.is_directory:
        return size_of(entry.path)
    return entry.size


def _remove_entries(
    entries: Iterable[FilesystemEntry],
    mode: ExecutionMode,
    remover: Optional[FilesystemRemover],
    reporter: Reporter,
) -> CleanupStats:
    remover = remover or FilesystemRemover()
    files_removed = 0
    space_freed = 0
    for entry in entries:
        # measured first: the entry is gone afterwards
        size = _entry_size(entry)
        if not mode.mutates:
            files_removed += 1
            space_freed += size
            continue
        if remover.remove(entry):
            files_removed += 1
            space_freed += size
            reporter.removed(entry.path)
        else:
            reporter.failed(entry.path)
    return CleanupStats(files_removed, space_freed)


def clean_directory(
    path: str,
    rule: RetentionRule,
    mode: ExecutionMode,
    remover: Optional[FilesystemRemover] = None,
    now: Optional[float] = None,
    reporter: Optional[Reporter] = None,
) -> CleanupStats:
    """
    Remove the qualifying immediate children of path.

    Under DRY_RUN nothing is touched and the stats describe what would be
    removed. A directory child counts as one removal, and only if it was
    deleted entirely. A missing or unreadable path yields empty stats.
    """
    entries = qualifying_children(path, rule, now)
    return _remove_entries(entries, mode, remover, reporter or NullReporter())


def estimate_directory(path: str, rule: RetentionRule, now: Optional[float] = None) -> Tuple[int, int]:
    """(count, bytes) that clean_directory would remove, using the same selection."""
    count = 0
    total = 0
    for entry in qualifying_children(path, rule, now):
        count += 1
        total += _entry_size(entry)
    return count, total


def remove_paths(
    paths: Iterable[str],
    mode: ExecutionMode,
    remover: Optional[FilesystemRemover] = None,
    reporter: Optional[Reporter] = None,
) -> CleanupStats:
    """Remove each path as a whole (file or tree). Missing paths are skipped."""
    entries = (FilesystemEntry.scan(p) for p in paths if os.path.lexists(p))
    return _remove_entries(entries, mode, remover, reporter or NullReporter())


def estimate_paths(paths: Iterable[str]) -> Tuple[int, int]:
    count = 0
    total = 0
    for p in paths:
        if not os.path.lexists(p):
            continue
        count += 1
        total += size_of(p)
    return count, total
