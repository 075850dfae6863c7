"""Execution-mode gate: decides whether a category's cleanup may proceed."""
from __future__ import annotations

from typing import Callable, Optional

from rich.markup import escape

from ..core.models import ExecutionMode
from ..utils.reporter import Reporter

AFFIRMATIVE = frozenset({"y", "yes"})


class ApprovalGate:
    """
    One decision per category, never per file.

    DRY_RUN describes the action and refuses; FORCE accepts silently;
    INTERACTIVE asks through `ask` and accepts "y" or "yes".
    """

    def __init__(self, mode: ExecutionMode, reporter: Reporter, ask: Optional[Callable[[str], str]] = None):
        self.mode = mode
        self.reporter = reporter
        self.ask = ask or self._console_ask

    def _console_ask(self, prompt: str) -> str:
        # Escape (y/N) so Rich doesn't treat it as markup
        return self.reporter.console.input(f"  [cyan]?[/] {escape(prompt)} [yellow]{escape('Proceed? (y/N):')}[/] ")

    def should_proceed(self, action: str, detail: Optional[str] = None) -> bool:
        if self.mode is ExecutionMode.DRY_RUN:
            self.reporter.console.print(f"  [yellow]→ {escape('[DRY RUN]')}[/] Would {escape(action)}")
            if detail:
                self.reporter.console.print(f"    [dim]{escape(detail)}[/]")
            return False
        if self.mode is ExecutionMode.FORCE:
            return True
        try:
            answer = self.ask(action)
        except EOFError:
            return False
        return (answer or "").strip().lower() in AFFIRMATIVE
