"""Rich console output for CLI commands."""

from typing import List, Optional

from rich.console import Console
from rich.table import Table

from ..models import BatchStats, FileOutcome, FileStatus


class BatchReport:
    """Render batch results to the console."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def render(self, stats: BatchStats, outcomes: List[FileOutcome], dry_run: bool = False) -> None:
        title = "Sanitize summary (dry run)" if dry_run else "Sanitize summary"
        table = Table(title=title, show_header=True, header_style="bold")
        table.add_column("Files", style="cyan")
        table.add_column("Count", justify="right")

        table.add_row("Total", str(stats.total_files))
        table.add_row("Processed", str(stats.processed_files))
        table.add_row("Changed", str(stats.changed_files))
        table.add_row("Skipped (excluded)", str(stats.skipped_files))
        error_style = "bold red" if stats.has_errors else "green"
        table.add_row("Errors", f"[{error_style}]{stats.error_files}[/{error_style}]")
        self.console.print(table)

        for outcome in outcomes:
            if outcome.status == FileStatus.ERRORED and outcome.error is not None:
                self.console.print(
                    f"[red]x[/red] {outcome.path}: {outcome.error.describe()}",
                    highlight=False,
                    soft_wrap=True,
                )
