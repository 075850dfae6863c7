"""Retention policy: does an entry qualify for deletion under a rule?"""
from __future__ import annotations

import time
from typing import Optional

from .models import FilesystemEntry, RetentionRule

SECONDS_PER_DAY = 86400


def elapsed_days(modified_time: float, now: Optional[float] = None) -> int:
    """Whole days since modified_time, truncated. Future times count as 0."""
    now = time.time() if now is None else now
    seconds = now - modified_time
    if seconds <= 0:
        return 0
    return int(seconds // SECONDS_PER_DAY)


def qualifies(entry: FilesystemEntry, rule: RetentionRule, now: Optional[float] = None) -> bool:
    """
    True if entry may be deleted under rule.

    Protected names never qualify. With no minimum age every other entry
    qualifies. With a minimum age, an entry whose modification time could not
    be read does NOT qualify: unknown age never leads to deletion.
    """
    if rule.protected(entry.name):
        return False
    if rule.min_age_days is None:
        return True
    if entry.modified_time is None:
        return False
    return elapsed_days(entry.modified_time, now) >= rule.min_age_days
