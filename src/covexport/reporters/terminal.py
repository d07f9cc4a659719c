"""Terminal reporter with rich output formatting."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from covexport.models.report import ReportDocument
    from covexport.models.summary import CoverageStat

console = Console()

_HIGH_COVERAGE = 80.0
_MEDIUM_COVERAGE = 50.0


class CLIReporter:
    """Rich terminal output for export results."""

    def __init__(self, output: Console | None = None) -> None:
        """Initialize the CLI reporter."""
        self.console = output or console

    def print_success(self, message: str) -> None:
        """Print a success message."""
        self.console.print(f"[green]✓[/green] {message}")

    def print_error(self, message: str) -> None:
        """Print an error message."""
        self.console.print(f"[red]✗[/red] {message}")

    def print_warning(self, message: str) -> None:
        """Print a warning message."""
        self.console.print(f"[yellow]⚠[/yellow] {message}")

    def print_info(self, message: str) -> None:
        """Print an info message."""
        self.console.print(f"[dim]{message}[/dim]")

    def print_coverage_summary(self, document: ReportDocument) -> None:
        """Print a per-file coverage table followed by the totals row."""
        table = Table(title="Coverage Summary", title_style="bold cyan")
        table.add_column("File", style="bold")
        table.add_column("Lines", justify="right")
        table.add_column("Functions", justify="right")
        table.add_column("Instantiations", justify="right")
        table.add_column("Regions", justify="right")

        for file_report in document.files:
            summary = file_report.summary
            table.add_row(
                self._strip_workdir(file_report.filename),
                self._format_stat(summary.line_stat),
                self._format_stat(summary.function_stat),
                self._format_stat(summary.instantiation_stat),
                self._format_stat(summary.region_stat),
            )

        totals = document.totals
        table.add_section()
        table.add_row(
            "[bold]Totals[/bold]",
            self._format_stat(totals.line_stat, bold=True),
            self._format_stat(totals.function_stat, bold=True),
            self._format_stat(totals.instantiation_stat, bold=True),
            self._format_stat(totals.region_stat, bold=True),
        )

        self.console.print(table)

    def _format_stat(self, stat: CoverageStat, *, bold: bool = False) -> str:
        color = self._get_coverage_color(stat.percent)
        if bold:
            color = f"bold {color}"
        return f"[{color}]{stat.percent:.1f}%[/{color}] ({stat.covered}/{stat.count})"

    def _get_coverage_color(self, percentage: float) -> str:
        """Get a color based on coverage percentage."""
        if percentage >= _HIGH_COVERAGE:
            return "green"
        if percentage >= _MEDIUM_COVERAGE:
            return "yellow"
        return "red"

    def _strip_workdir(self, file_path: str) -> str:
        """Strip the current working directory from file path for cleaner display."""
        try:
            return str(Path(file_path).relative_to(Path.cwd()))
        except ValueError:
            return file_path


# Singleton instance for easy import
reporter = CLIReporter()
