"""Disk and path helpers: size estimation and disk usage."""
from __future__ import annotations

import os
import shutil
import stat
from dataclasses import dataclass
from typing import Iterator, Optional

from ..core.models import FilesystemEntry, RetentionRule
from ..core.retention import qualifies


#size formatter
def human_size(num):
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if abs(num) < 1024.0:
            return f"{num:3.1f} {unit}"
        num /= 1024.0
    return f"{num:.1f} PB"


def size_of(path: str) -> int:
    """
    Recursive size of path in bytes.

    Symlinks are never followed (a link counts its own size). Entries that
    cannot be read contribute 0, and a missing path is 0.
    """
    try:
        st = os.lstat(path)
    except OSError:
        return 0
    if not stat.S_ISDIR(st.st_mode):
        return st.st_size

    total = 0
    stack = [path]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as it:
                entries = list(it)
        except OSError:
            continue
        for entry in entries:
            try:
                if entry.is_dir(follow_symlinks=False):
                    stack.append(entry.path)
                else:
                    total += entry.stat(follow_symlinks=False).st_size
            except OSError:
                pass
    return total


def iter_children(path: str) -> Iterator[FilesystemEntry]:
    """Snapshots of the immediate children of path. Nothing if unlistable."""
    try:
        names = os.listdir(path)
    except OSError:
        return
    for name in names:
        yield FilesystemEntry.scan(os.path.join(path, name))


def qualifying_children(path: str, rule: RetentionRule, now: Optional[float] = None) -> Iterator[FilesystemEntry]:
    """Immediate children of path that qualify under rule."""
    for entry in iter_children(path):
        if qualifies(entry, rule, now):
            yield entry


def size_of_aged(path: str, min_age_days: int, now: Optional[float] = None) -> int:
    """Total size of immediate children at least min_age_days old (whole subtree per child)."""
    rule = RetentionRule.older_than(min_age_days)
    return sum(size_of(e.path) for e in qualifying_children(path, rule, now))


@dataclass(frozen=True)
class DiskInfo:
    total: int = 0
    used: int = 0
    available: int = 0

    @property
    def percent_used(self) -> float:
        if not self.total:
            return 0.0
        return self.used / self.total * 100.0

    def after_freeing(self, size: int) -> "DiskInfo":
        """Projected usage once size bytes are freed."""
        used = max(self.used - size, 0)
        return DiskInfo(self.total, used, self.available + size)


def disk_info(path: str = "/") -> DiskInfo:
    """Disk usage of the filesystem holding path. Zeros if it can't be read."""
    try:
        usage = shutil.disk_usage(path)
    except OSError:
        return DiskInfo()
    return DiskInfo(total=usage.total, used=usage.used, available=usage.free)
