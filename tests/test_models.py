"""Tests for mac_cleanup.core.models."""
import unittest

from mac_cleanup.core.models import (
    CategoryOutcome,
    CategoryStatus,
    CleanupStats,
    ExecutionMode,
    RunReport,
)


class TestCleanupStats(unittest.TestCase):
    def test_addition(self) -> None:
        self.assertEqual(CleanupStats(1, 10) + CleanupStats(2, 5), CleanupStats(3, 15))
        self.assertEqual(sum([CleanupStats(1, 1), CleanupStats(4, 4)]), CleanupStats(5, 5))

    def test_identity(self) -> None:
        s = CleanupStats(3, 300)
        self.assertEqual(s + CleanupStats(), s)


class TestRunReport(unittest.TestCase):
    def test_total_and_by_status(self) -> None:
        report = RunReport(
            ExecutionMode.FORCE,
            (
                CategoryOutcome("a", "A", CategoryStatus.CLEANED, 10, CleanupStats(2, 10)),
                CategoryOutcome("b", "B", CategoryStatus.SKIPPED, message="declined"),
                CategoryOutcome("c", "C", CategoryStatus.CLEANED, 5, CleanupStats(1, 5)),
            ),
        )
        self.assertEqual(report.total, CleanupStats(3, 15))
        self.assertEqual([o.key for o in report.by_status(CategoryStatus.CLEANED)], ["a", "c"])

    def test_empty_report(self) -> None:
        self.assertEqual(RunReport(ExecutionMode.DRY_RUN).total, CleanupStats())
