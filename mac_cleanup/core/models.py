"""Value types shared by the cleanup engine."""
from __future__ import annotations

import enum
import os
import stat
from dataclasses import dataclass, field
from typing import Callable, Optional


PROTECTED_NAMES = frozenset({".DS_Store", ".localized"})


def is_protected_name(name: str) -> bool:
    """True for dotfiles and fixed system marker files."""
    return name.startswith(".") or name in PROTECTED_NAMES


@dataclass(frozen=True)
class CleanupStats:
    """Files removed and bytes freed by one operation. Add to merge."""

    files_removed: int = 0
    space_freed: int = 0

    def __add__(self, other: "CleanupStats") -> "CleanupStats":
        if not isinstance(other, CleanupStats):
            return NotImplemented
        return CleanupStats(
            self.files_removed + other.files_removed,
            self.space_freed + other.space_freed,
        )

    def __radd__(self, other):
        # lets sum() start from 0
        if other == 0:
            return self
        return NotImplemented


@dataclass(frozen=True)
class FilesystemEntry:
    """Snapshot of one entry taken with lstat at scan time."""

    path: str
    name: str
    is_directory: bool = False
    is_symlink: bool = False
    size: int = 0
    modified_time: Optional[float] = None

    @classmethod
    def scan(cls, path: str) -> "FilesystemEntry":
        """Snapshot path. Unreadable metadata leaves modified_time as None."""
        name = os.path.basename(os.path.normpath(path))
        try:
            st = os.lstat(path)
        except OSError:
            return cls(path=path, name=name)
        return cls(
            path=path,
            name=name,
            is_directory=stat.S_ISDIR(st.st_mode),
            is_symlink=stat.S_ISLNK(st.st_mode),
            size=st.st_size,
            modified_time=st.st_mtime,
        )


@dataclass(frozen=True)
class RetentionRule:
    """Minimum age in whole days (None = full clear) and protected names."""

    min_age_days: Optional[int] = None
    protected: Callable[[str], bool] = is_protected_name

    @classmethod
    def full_clear(cls) -> "RetentionRule":
        return cls(None)

    @classmethod
    def older_than(cls, days: int) -> "RetentionRule":
        if days < 0:
            raise ValueError(f"min_age_days must be >= 0, got {days}")
        return cls(days)

    def describe(self) -> str:
        if self.min_age_days is None:
            return "all"
        return f"{self.min_age_days}+ days old"


class ExecutionMode(enum.Enum):
    DRY_RUN = "dry-run"
    FORCE = "force"
    INTERACTIVE = "interactive"

    @classmethod
    def resolve(cls, dry_run: bool = False, force: bool = False, interactive: bool = True) -> "ExecutionMode":
        """Pick the single active mode. Dry run beats force, force beats interactive."""
        if dry_run:
            return cls.DRY_RUN
        if force:
            return cls.FORCE
        if interactive:
            return cls.INTERACTIVE
        return cls.FORCE

    @property
    def mutates(self) -> bool:
        return self is not ExecutionMode.DRY_RUN


class CategoryKind(enum.Enum):
    CHILDREN = "children"  # clean entries inside each root, keep the root
    PATHS = "paths"  # remove each root as a whole
    SEARCH = "search"  # remove RecursiveFinder matches under the roots
    EXTERNAL = "external"  # delegate to an external command


@dataclass(frozen=True)
class CategoryTarget:
    """One catalogue entry. Static; never mutated at runtime."""

    key: str
    label: str
    kind: CategoryKind
    action: str
    roots: tuple = ()
    rule: RetentionRule = field(default_factory=RetentionRule.full_clear)
    root_rules: tuple = ()  # ((root, RetentionRule), ...) overrides
    prerequisite: Optional[Callable[[], bool]] = None
    predicate: Optional[Callable[[os.DirEntry], bool]] = None
    max_depth: int = 0
    external: Optional[object] = None
    skip_when_empty: bool = True

    def rule_for(self, root: str) -> RetentionRule:
        for path, rule in self.root_rules:
            if path == root:
                return rule
        return self.rule


class CategoryStatus(enum.Enum):
    SKIPPED = "skipped"
    SIMULATED = "simulated"
    CLEANED = "cleaned"
    FAILED = "failed"


@dataclass(frozen=True)
class CategoryOutcome:
    key: str
    label: str
    status: CategoryStatus
    estimate: int = 0
    stats: CleanupStats = field(default_factory=CleanupStats)
    message: str = ""


@dataclass(frozen=True)
class RunReport:
    mode: ExecutionMode
    outcomes: tuple = ()

    @property
    def total(self) -> CleanupStats:
        return sum((o.stats for o in self.outcomes), CleanupStats())

    def by_status(self, status: CategoryStatus) -> list:
        return [o for o in self.outcomes if o.status is status]
