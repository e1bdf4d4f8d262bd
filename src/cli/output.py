"""Terminal output handling using Rich library.

This module provides the OutputHandler class for all CLI terminal output:
colored status lines, a spinner while pages are published and the final
summary table. Supports verbosity levels and the --no-color flag.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from rich.console import Console
from rich.live import Live
from rich.spinner import Spinner
from rich.table import Table

from src.publisher.models import SyncOutcome, SyncReport

OUTCOME_STYLES = {
    SyncOutcome.CREATED: ("+", "green"),
    SyncOutcome.UPDATED: ("~", "blue"),
    SyncOutcome.UNCHANGED: ("─", "dim"),
    SyncOutcome.DELETED: ("✗", "red"),
}


class OutputHandler:
    """Handles all terminal output using Rich library.

    Attributes:
        verbosity: Verbosity level (0=summary, 1=info, 2=debug)
        console: Rich Console instance for output

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> handler.success("Operation completed")
        >>> with handler.spinner("Publishing..."):
        ...     pass
    """

    def __init__(self, verbosity: int = 0, no_color: bool = False, console: Optional[Console] = None):
        """Initialize output handler.

        Args:
            verbosity: Verbosity level (0=summary, 1=info, 2=debug)
            no_color: Disable color output if True
            console: Console to print to (a new one when None)
        """
        self.verbosity = verbosity
        self.console = console or Console(
            no_color=no_color,
            highlight=False,
        )

    def success(self, message: str) -> None:
        """Display success message in green."""
        self.console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        """Display error message in red."""
        self.console.print(f"[red]✗[/red] {message}", style="red")

    def warning(self, message: str) -> None:
        """Display warning message in yellow."""
        self.console.print(f"[yellow]⚠[/yellow] {message}", style="yellow")

    def info(self, message: str) -> None:
        """Display info message (only if verbosity >= 1)."""
        if self.verbosity >= 1:
            self.console.print(message)

    def debug(self, message: str) -> None:
        """Display debug message (only if verbosity >= 2)."""
        if self.verbosity >= 2:
            self.console.print(f"[dim]{message}[/dim]")

    @contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        """Display spinner while a long operation runs.

        Example:
            >>> with handler.spinner("Publishing pages..."):
            ...     publisher.sync(...)
        """
        spinner = Spinner("dots", text=message)
        with Live(spinner, console=self.console, refresh_per_second=10, transient=True):
            yield

    def print_publish_summary(
        self,
        site_name: str,
        report: SyncReport,
        url: Optional[str] = None,
        dry_run: bool = False,
    ) -> None:
        """Display the outcome of a publish run.

        Args:
            site_name: Title of the published site
            report: Report returned by the publisher
            url: Link to the home page, if known
            dry_run: True when nothing was actually written
        """
        heading = "Dry Run - Publish Preview" if dry_run else "Publish Summary"
        self.console.print(f"\n[bold]{heading}:[/bold]")

        changed = [r for r in report.results if r.outcome != SyncOutcome.UNCHANGED]
        if changed and (self.verbosity >= 1 or dry_run):
            table = Table(show_header=True, header_style="bold")
            table.add_column("")
            table.add_column("Page")
            table.add_column("Section", style="dim")
            for result in changed:
                symbol, color = OUTCOME_STYLES[result.outcome]
                table.add_row(f"[{color}]{symbol}[/{color}]", result.title, result.section or "")
            self.console.print(table)

        verb = "Would be" if dry_run else ""
        for outcome, count in (
            (SyncOutcome.CREATED, report.created),
            (SyncOutcome.UPDATED, report.updated),
            (SyncOutcome.DELETED, report.deleted),
            (SyncOutcome.UNCHANGED, report.unchanged),
        ):
            if count > 0:
                symbol, color = OUTCOME_STYLES[outcome]
                label = f"{verb} {outcome.value}".strip().capitalize()
                self.console.print(f"  [{color}]{symbol}[/{color}] {label}: {count} page(s)")

        for section in report.unreachable_sections:
            self.warning(f"Section '{section}' was not published: its parent chain does not reach the site")

        if not report.changed:
            self.console.print(f'\n[green]"{site_name}" is already up to date.[/green]')
        elif dry_run:
            self.console.print("\n[yellow]Dry run: no changes were made[/yellow]")
        else:
            self.console.print(f'\n[green]"{site_name}" published successfully[/green]')

        if url and not dry_run:
            self.console.print(f"  {url}")

    def print_cleanup_summary(self, site_name: str, report: SyncReport, dry_run: bool = False) -> None:
        """Display the outcome of a cleanup run."""
        self.console.print("\n[bold]Cleanup Summary:[/bold]")
        if report.home_id is None:
            self.console.print(f'\n[yellow]No pages found for "{site_name}"[/yellow]')
            return

        verb = "would be deleted" if dry_run else "deleted"
        self.console.print(f"  [red]✗[/red] {report.deleted} page(s) {verb}")
        if dry_run:
            self.console.print("\n[yellow]Dry run: no changes were made[/yellow]")
        else:
            self.console.print(f'\n[green]All pages of "{site_name}" have been deleted[/green]')
