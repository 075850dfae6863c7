"""Runs categories in order: probe, estimate, gate, clean, fold stats."""
from __future__ import annotations

import os
import subprocess
from typing import Callable, Iterable, List, Optional, Tuple

from rich.markup import escape
from rich.panel import Panel

from ..core.models import (
    CategoryKind,
    CategoryOutcome,
    CategoryStatus,
    CategoryTarget,
    CleanupStats,
    ExecutionMode,
    FilesystemEntry,
    RunReport,
)
from ..core.retention import qualifies
from ..utils.disk import human_size, size_of
from ..utils.reporter import Reporter
from . import cleaner_service as cleaner
from . import finder_service as finder
from .approval import ApprovalGate

SHOW_CANDIDATES = 5


class CleanupOrchestrator:
    """
    Sequences cleanup categories under one execution mode.

    Each category ends SKIPPED, SIMULATED, CLEANED or FAILED, and categories
    never affect each other: an error inside one is reported and the run
    moves on. The run total is folded from the per-category stats.
    """

    def __init__(
        self,
        mode: ExecutionMode,
        reporter: Optional[Reporter] = None,
        gate: Optional[ApprovalGate] = None,
        remover: Optional[cleaner.FilesystemRemover] = None,
        now: Optional[float] = None,
        preview: Optional[Callable[[int], None]] = None,
    ):
        self.mode = mode
        self.reporter = reporter or Reporter()
        self.gate = gate or ApprovalGate(mode, self.reporter)
        self.remover = remover or cleaner.FilesystemRemover()
        self.now = now
        self.preview = preview

    def prerequisite_met(self, target: CategoryTarget) -> bool:
        if target.prerequisite is None:
            return True
        try:
            return bool(target.prerequisite())
        except Exception:
            # a probe that blows up means the tool is not usable
            return False

    def search_candidates(self, target: CategoryTarget) -> List[str]:
        found = finder.find(target.roots, target.predicate, target.max_depth)
        return [p for p in found if qualifies(FilesystemEntry.scan(p), target.rule, self.now)]

    def estimate(self, target: CategoryTarget, candidates: Optional[List[str]] = None) -> Tuple[int, int]:
        """(candidate count, bytes) reclaimable for target."""
        if target.kind is CategoryKind.CHILDREN:
            count = total = 0
            for root in target.roots:
                c, b = cleaner.estimate_directory(root, target.rule_for(root), self.now)
                count += c
                total += b
            return count, total
        if target.kind is CategoryKind.PATHS:
            return cleaner.estimate_paths(target.roots)
        if target.kind is CategoryKind.SEARCH:
            if candidates is None:
                candidates = self.search_candidates(target)
            return len(candidates), sum(size_of(p) for p in candidates)
        if target.kind is CategoryKind.EXTERNAL:
            return 0, target.external.estimate()
        return 0, 0

    def total_potential(self, targets: Iterable[CategoryTarget]) -> int:
        total = 0
        for t in targets:
            if self.prerequisite_met(t):
                total += self.estimate(t)[1]
        return total

    def _execute(self, target: CategoryTarget, mode: ExecutionMode, candidates: List[str]) -> CleanupStats:
        if target.kind is CategoryKind.CHILDREN:
            stats = CleanupStats()
            for root in target.roots:
                if not os.path.isdir(root):
                    continue
                self.reporter.action(f"Cleaning {root}")
                stats += cleaner.clean_directory(
                    root, target.rule_for(root), mode, self.remover, self.now, self.reporter
                )
            return stats
        if target.kind is CategoryKind.PATHS:
            for root in target.roots:
                if os.path.lexists(root):
                    self.reporter.action(f"Cleaning {root}")
            return cleaner.remove_paths(target.roots, mode, self.remover, self.reporter)
        if target.kind is CategoryKind.SEARCH:
            return cleaner.remove_paths(candidates, mode, self.remover, self.reporter)
        return CleanupStats()

    def _show_candidates(self, candidates: List[str], total: int) -> None:
        self.reporter.info(f"Found {len(candidates)} item(s) ({human_size(total)})")
        for p in candidates[:SHOW_CANDIDATES]:
            self.reporter.console.print(f"    [dim]• {escape(p)} ({human_size(size_of(p))})[/]")
        if len(candidates) > SHOW_CANDIDATES:
            self.reporter.console.print(f"    [dim]• ... and {len(candidates) - SHOW_CANDIDATES} more[/]")

    def _run_external(self, target: CategoryTarget, estimate: int) -> CategoryOutcome:
        if not self.mode.mutates:
            stats = CleanupStats(0, estimate)
            return CategoryOutcome(target.key, target.label, CategoryStatus.SIMULATED, estimate, stats)
        self.reporter.action(f"Running {target.external.description}")
        result = target.external.run()
        if not result.ok:
            self.reporter.error(result.message)
            return CategoryOutcome(target.key, target.label, CategoryStatus.FAILED, estimate, message=result.message)
        self.reporter.success(result.message)
        stats = CleanupStats(0, result.freed_bytes)
        return CategoryOutcome(target.key, target.label, CategoryStatus.CLEANED, estimate, stats, result.message)

    def process(self, target: CategoryTarget) -> CategoryOutcome:
        """Take one category through probe → estimate → gate → clean."""
        self.reporter.console.print()
        self.reporter.console.print(Panel(f"[bold]{escape(target.label)}[/]", style="cyan", border_style="dim", padding=(0, 1)))

        if not self.prerequisite_met(target):
            self.reporter.info("Not installed. Skipping.")
            return CategoryOutcome(target.key, target.label, CategoryStatus.SKIPPED, message="not installed")

        try:
            return self._process(target)
        except (OSError, subprocess.SubprocessError) as e:
            msg = f"{target.label}: {e}"
            self.reporter.error(msg)
            return CategoryOutcome(target.key, target.label, CategoryStatus.FAILED, message=msg)

    def _process(self, target: CategoryTarget) -> CategoryOutcome:
        candidates = []
        if target.kind is CategoryKind.SEARCH:
            self.reporter.action("Searching...")
            candidates = self.search_candidates(target)
        count, size = self.estimate(target, candidates)

        if target.kind is CategoryKind.SEARCH and candidates:
            self._show_candidates(candidates, size)
        else:
            self.reporter.info(f"Estimated size: {human_size(size)}")

        if target.skip_when_empty and count == 0 and size == 0:
            self.reporter.info("Nothing to clean")
            return CategoryOutcome(target.key, target.label, CategoryStatus.SKIPPED, message="nothing to clean")
        if self.preview and size:
            self.preview(size)

        detail = f"This will free approximately {human_size(size)}" if size else None
        approved = self.gate.should_proceed(target.action, detail)
        if self.mode.mutates and not approved:
            return CategoryOutcome(target.key, target.label, CategoryStatus.SKIPPED, size, message="declined")

        if target.kind is CategoryKind.EXTERNAL:
            return self._run_external(target, size)

        stats = self._execute(target, self.mode, candidates)
        if not self.mode.mutates:
            self.reporter.info(f"Would remove {stats.files_removed} item(s), freeing {human_size(stats.space_freed)}")
            return CategoryOutcome(target.key, target.label, CategoryStatus.SIMULATED, size, stats)
        if count and not stats.files_removed:
            msg = f"Could not remove any of {count} item(s)"
            self.reporter.error(msg)
            return CategoryOutcome(target.key, target.label, CategoryStatus.FAILED, size, stats, msg)
        msg = f"Cleaned {stats.files_removed} item(s), freed {human_size(stats.space_freed)}"
        self.reporter.success(msg)
        return CategoryOutcome(target.key, target.label, CategoryStatus.CLEANED, size, stats, msg)

    def run(self, targets: Iterable[CategoryTarget]) -> RunReport:
        outcomes = tuple(self.process(t) for t in targets)
        return RunReport(self.mode, outcomes)
