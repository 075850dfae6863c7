"""Core types, retention policy, constants and config for mac-cleanup."""

from .models import (
    CategoryKind,
    CategoryOutcome,
    CategoryStatus,
    CategoryTarget,
    CleanupStats,
    ExecutionMode,
    FilesystemEntry,
    RetentionRule,
    RunReport,
    is_protected_name,
)
from .retention import elapsed_days, qualifies
from . import config

__all__ = [
    "CategoryKind",
    "CategoryOutcome",
    "CategoryStatus",
    "CategoryTarget",
    "CleanupStats",
    "ExecutionMode",
    "FilesystemEntry",
    "RetentionRule",
    "RunReport",
    "is_protected_name",
    "elapsed_days",
    "qualifies",
    "config",
]
