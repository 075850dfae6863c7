"""Leveled console output for cleanup runs."""
from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.markup import escape

console = Console()


class Reporter:
    """
    Logging sink used by the engine: action (verbose only), error, success, info.

    Output is observational only; nothing in the engine depends on it.
    """

    def __init__(self, out: Optional[Console] = None, verbose: bool = False):
        self.console = out or console
        self.verbose = verbose

    def action(self, message: str) -> None:
        if self.verbose:
            self.console.print(f"  [green]→[/] {escape(message)}")

    def error(self, message: str) -> None:
        self.console.print(f"  [red]✗[/] {escape(message)}")

    def success(self, message: str) -> None:
        self.console.print(f"  [green]✓[/] {escape(message)}")

    def info(self, message: str) -> None:
        self.console.print(f"  [blue]ℹ[/] {escape(message)}")

    def removed(self, path: str) -> None:
        if self.verbose:
            self.console.print(f"    [green]✓[/] Removed: {escape(path)}")

    def failed(self, path: str) -> None:
        if self.verbose:
            self.console.print(f"    [red]✗[/] Could not remove: {escape(path)}")


class NullReporter(Reporter):
    """Swallows everything; for library use and tests."""

    def __init__(self):
        super().__init__(Console(quiet=True))
