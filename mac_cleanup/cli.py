#!/usr/bin/env python3
"""Command-line interface for mac-cleanup."""
import argparse
import json
import sys

import questionary
from questionary import Choice
from rich.console import Console
from rich.markup import escape
from rich.rule import Rule
from rich.table import Table

from . import __version__
from .core import config as config_module
from .core.models import CategoryStatus, ExecutionMode, RunReport
from .core.targets import build_categories, category_keys, select
from .services.approval import ApprovalGate
from .services.orchestrator import CleanupOrchestrator
from .utils.disk import DiskInfo, disk_info, human_size
from .utils.memory import ram_status
from .utils.reporter import Reporter

console = Console()

BAR_WIDTH = 30

STATUS_STYLES = {
    CategoryStatus.CLEANED: "green",
    CategoryStatus.SIMULATED: "yellow",
    CategoryStatus.SKIPPED: "dim",
    CategoryStatus.FAILED: "red",
}


def print_banner():
    console.print(Rule(f"[bold blue]🧹 Mac Cleanup Tool[/] [dim]v{__version__}[/]", style="blue"))
    console.print()


def show_disk_status(disk: DiskInfo, title: str) -> None:
    console.print(f"[bold cyan]{title}[/]")
    used_len = int(disk.percent_used / 100.0 * BAR_WIDTH)
    bar = f"[red]{'█' * used_len}[/][dim]{'░' * (BAR_WIDTH - used_len)}[/]"
    console.print(f"  [bold]Disk Usage:[/] [{bar}] {disk.percent_used:.1f}%")
    console.print(
        f"  [bold]Space:[/] [red]{human_size(disk.used)}[/] / {human_size(disk.total)} "
        f"([green]{human_size(disk.available)} free[/])"
    )


def show_space_preview(size: int) -> None:
    disk = disk_info()
    after = disk.after_freeing(size)
    console.print(
        f"  [dim]Preview:[/] [dim]{human_size(disk.available)}[/] → [green]{human_size(after.available)}[/] "
        f"({disk.percent_used:.1f}% → {after.percent_used:.1f}%)"
    )


def show_ram_status() -> None:
    ram = ram_status()
    console.print(f"  [bold]RAM Usage:[/] [red]{human_size(ram.used)}[/] / {human_size(ram.total)}")
    console.print(
        f"  [bold]Available:[/] [green]{human_size(ram.available)}[/] "
        f"({human_size(ram.inactive)} inactive can be freed)"
    )


def print_mode(mode: ExecutionMode) -> None:
    console.print()
    if mode is ExecutionMode.DRY_RUN:
        console.print("[yellow]🔍 Running in DRY RUN mode - nothing will be deleted[/]")
    elif mode is ExecutionMode.FORCE:
        console.print("[red]⚠️  Running in FORCE mode - no confirmation prompts![/]")
    else:
        console.print("[green]💬 Running in INTERACTIVE mode - will ask before actions[/]")
    console.print()


def confirm(prompt):
    """Confirm the user's choice."""
    # Escape (y/N) so Rich doesn't treat it as markup
    ans = console.input(f"[cyan]?[/] [bold yellow]{prompt} {escape('(y/N)')}:[/] ").strip().lower()
    return ans in ("y", "yes")


def _prompt_categories_tui(categories):
    """Checkbox TUI (space to toggle, enter to confirm). Returns selected categories."""
    choices = [Choice(c.label, value=c.key, checked=True) for c in categories]
    result = questionary.checkbox(
        "Select categories to clean: SPACE to toggle, ENTER to confirm.",
        choices=choices,
    ).ask()
    if not result:
        return []  # Ctrl+C or nothing ticked
    return select(categories, only=result)


def prompt_categories(categories):
    """Show what will be cleaned and let the user confirm or narrow it down."""
    if sys.stdin.isatty():
        return _prompt_categories_tui(categories)
    console.print()
    console.print("[bold]This tool will clean the following:[/]")
    for c in categories:
        console.print(f"  • {escape(c.label)}")
    console.print()
    if not confirm("Continue with cleanup?"):
        return []
    return categories


def print_summary(report: RunReport) -> None:
    table = Table(show_header=True, header_style="bold cyan", box=None, padding=(0, 2))
    table.add_column("Category", style="")
    table.add_column("Status", style="")
    table.add_column("Items", justify="right", style="yellow")
    table.add_column("Freed", justify="right", style="yellow")
    for o in report.outcomes:
        style = STATUS_STYLES[o.status]
        table.add_row(o.label, f"[{style}]{o.status.value}[/]", str(o.stats.files_removed), human_size(o.stats.space_freed))
    console.print(table)


def print_final_report(report: RunReport, initial: DiskInfo) -> None:
    console.print()
    console.print(Rule("[bold green]✨ Cleanup Complete![/]", style="green"))
    console.print()
    print_summary(report)
    total = report.total
    if report.mode is ExecutionMode.DRY_RUN:
        console.print()
        console.print(f"  [bold]Would remove:[/] [yellow]{total.files_removed}[/] item(s), "
                      f"[green]{human_size(total.space_freed)}[/]")
        console.print("[dim]No files were actually deleted (dry run mode)[/]")
        return

    final = disk_info()
    actual = max(final.available - initial.available, 0)
    console.print()
    console.print("[bold cyan]💾 Disk Space Summary:[/]")
    console.print(
        f"  [bold]Before:[/] [red]{human_size(initial.available)} available[/] → "
        f"[green]{human_size(final.available)} available[/]"
    )
    console.print(f"  [bold]Actual space freed:[/] [bold green]{human_size(actual)}[/]")
    console.print()
    console.print("[bold cyan]📊 Cleanup Statistics:[/]")
    console.print(f"  [bold]Files removed:[/] [yellow]{total.files_removed}[/]")
    console.print(f"  [bold]Reported freed:[/] [green]{human_size(total.space_freed)}[/]")
    console.print()
    show_disk_status(final, "📱 Final Disk Status")
    if initial.total and actual:
        console.print(f"\n  [green]✨[/] Disk space improved by {actual / initial.total * 100.0:.1f}%! 🎉")


def _list_categories() -> None:
    """List the categories."""
    console.print(Rule("[bold cyan]🧹 Mac Cleanup Categories[/]", style="cyan"))
    console.print()
    table = Table(show_header=True, header_style="bold cyan", box=None, padding=(0, 2))
    table.add_column("Key", style="cyan")
    table.add_column("Description", style="")
    table.add_column("Keeps", style="dim yellow")
    for c in build_categories():
        keeps = "" if c.kind.value in ("external", "paths") else c.rule.describe()
        table.add_row(c.key, c.label, keeps)
    console.print(table)
    console.print()


def _run_config(argv: list) -> None:
    """Run the configuration tasks."""
    p = argparse.ArgumentParser(prog="mac-cleanup config", description="Manage configuration.")
    p.add_argument("--init", action="store_true", help="Create default config file")
    p.add_argument("--show", action="store_true", help="Show current config")
    args = p.parse_args(argv)
    if args.init:
        path = config_module.init_config()
        console.print(Rule("[bold cyan]Config[/]", style="cyan"))
        console.print()
        console.print(f"  [green]✓[/] Created config at [cyan]{escape(path)}[/]")
        console.print()
        return
    if args.show:
        if not config_module.config_exists():
            console.print("[yellow]No config found. Run: mac-cleanup config --init[/]")
            return
        cfg = config_module.load()
        console.print(Rule("[bold cyan]Config[/]", style="cyan"))
        console.print()
        console.print(json.dumps(cfg, indent=2), markup=False)
        console.print()
        return
    p.print_help()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mac-cleanup", description="🧹 Mac Cleanup Tool")
    parser.add_argument("-i", "--interactive", action="store_true", default=True,
                        help="Ask before each category (default).")
    parser.add_argument("-d", "--dry-run", action="store_true", help="Only show what would be deleted.")
    parser.add_argument("-f", "--force", action="store_true", help="Delete without asking (use with caution!).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output.")
    parser.add_argument("-r", "--ram-only", action="store_true", help="Clean RAM only.")
    parser.add_argument("--only", nargs="+", metavar="KEY", help="Only run these categories (see `categories`).")
    return parser


def run_cleanup(args) -> int:
    mode = ExecutionMode.resolve(dry_run=args.dry_run, force=args.force, interactive=args.interactive)
    reporter = Reporter(console, verbose=args.verbose)
    orchestrator = CleanupOrchestrator(
        mode,
        reporter=reporter,
        gate=ApprovalGate(mode, reporter),
        preview=show_space_preview,
    )
    cfg = config_module.load()
    categories = build_categories(cfg=cfg)

    if args.ram_only:
        console.print("[bold]🧠 RAM Cleanup Mode[/]")
        show_ram_status()
        orchestrator.run(select(categories, only=["ram"]))
        return 0

    keys = category_keys(categories)
    unknown = [k for k in args.only or [] if k not in keys]
    if unknown:
        console.print(f"[red]Unknown category: {', '.join(unknown)}[/]")
        console.print(f"[dim]Valid keys: {', '.join(keys)}[/]")
        return 1
    selected = select(categories, only=args.only, exclude=cfg.get("exclude_categories"))

    initial = disk_info()
    show_disk_status(initial, "Current Disk Status")
    print_mode(mode)

    if mode is ExecutionMode.INTERACTIVE:
        selected = prompt_categories(selected)
        if not selected:
            console.print("\n[yellow]Cleanup cancelled.[/]")
            return 0

    console.print("\n[bold cyan]📊 Calculating cleanup potential...[/]")
    potential = orchestrator.total_potential(selected)
    console.print(f"  Total potential cleanup: [bold yellow]{human_size(potential)}[/]")

    report = orchestrator.run(selected)
    print_final_report(report, initial)
    return 0


def main(argv=None):
    """Main function."""
    argv = argv if argv is not None else sys.argv[1:]
    if argv and argv[0] == "categories":
        _list_categories()
        return 0
    if argv and argv[0] == "config":
        _run_config(argv[1:])
        return 0

    args = build_parser().parse_args(argv)
    print_banner()
    try:
        return run_cleanup(args)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/]")
        return 130


if __name__ == "__main__":
    sys.exit(main())
