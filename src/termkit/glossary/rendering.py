"""Run report rendering with Rich.

Prints the resolution summary and the term-help diagnostics of a run,
grouped by message with their file:line locations.
"""

import logging

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .report import RunReport

logger = logging.getLogger(__name__)


def _locations(files: dict[str, list[int]]) -> str:
    """Format `{file: [lines]}` as one `file:l1:l2` line per file."""
    return "\n".join(f"{file}:{':'.join(str(n) for n in lines)}" for file, lines in files.items())


def render_report(console: Console, report: RunReport) -> None:
    """Render the run report.

    Args:
        console: Rich console instance
        report: Report of a finished run
    """
    summary = (
        f"[bold]Number of files modified:[/bold] {len(report.files)}\n"
        f"[bold]Number of terms converted:[/bold] {len(report.converted)}"
    )
    console.print(Panel(summary, title="Resolution Report", border_style="cyan"))

    grouped = report.grouped_term_help()
    if grouped:
        table = Table(show_header=True, header_style="bold magenta", title="Term Errors")
        table.add_column("", style="bold red", width=9, no_wrap=True)
        table.add_column("Message", style="white")
        table.add_column("Locations", style="cyan")
        for message, files in grouped:
            table.add_row("TERM HELP", escape(message), escape(_locations(files)))
        console.print(table)

    if report.errors:
        console.print("\n[bold]Main Errors:[/bold]")
        for error in report.errors:
            console.print(f"[bold red]ERROR[/bold red] {escape(error)}", highlight=False)
