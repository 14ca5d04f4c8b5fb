"""Rich terminal renderer for pin/update runs.

Per file, every rewritten reference is shown as ``old -> new``; the run ends
with one summary table plus any unresolved-reference warnings.

Color scheme
------------
- red     : reference before rewriting
- green   : reference after pinning
- cyan    : reference after updating to the latest release
- yellow  : warnings
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from pinbump.models.references import WorkflowDocument
from pinbump.models.reports import FileResult, RunSummary


class SummaryRenderer:
    """Renders ``FileResult`` and ``RunSummary`` as Rich terminal output.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    # ------------------------------------------------------------------
    # pin / update
    # ------------------------------------------------------------------

    def print_file_changes(self, result: FileResult) -> None:
        """Print the ``old -> new`` lines for one changed file."""
        if not result.changed:
            return
        self.console.print(f"\n[bold]Processing:[/bold] {result.path}")
        for change in result.changes:
            line = Text(f"  {change.line:>4}  ")
            line.append(change.before, style="red")
            line.append(" -> ", style="bright_white")
            line.append(change.after, style="cyan" if change.updated else "green")
            self.console.print(line)

    def render_summary(self, summary: RunSummary) -> Panel:
        """Render the end-of-run counts as a Panel."""
        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column("Metric", style="bold")
        table.add_column("Count", justify="right")
        table.add_row("Files scanned", str(summary.files_scanned))
        changed_label = "Files to change" if summary.dry_run else "Files changed"
        table.add_row(changed_label, str(len(summary.files_changed)))
        table.add_row("References pinned", f"[green]{summary.references_pinned}[/green]")
        table.add_row("References updated", f"[cyan]{summary.references_updated}[/cyan]")
        table.add_row("References unchanged", f"[dim]{summary.references_unchanged}[/dim]")
        skipped_style = "yellow" if summary.references_skipped else "dim"
        table.add_row(
            "References skipped",
            f"[{skipped_style}]{summary.references_skipped}[/{skipped_style}]",
        )

        title = "[bold]Pinbump (dry run)[/bold]" if summary.dry_run else "[bold]Pinbump[/bold]"
        border = "yellow" if summary.references_skipped else "green"
        return Panel(table, title=title, border_style=border, padding=(1, 2))

    def print_summary(self, summary: RunSummary) -> None:
        """Print the summary panel followed by any warnings."""
        if not summary.files_scanned:
            self.console.print("[dim]No workflow files found.[/dim]")
            return
        self.console.print()
        self.console.print(self.render_summary(summary))
        for warning in summary.warnings:
            self.console.print(
                f"[yellow]warning:[/yellow] {warning.path}:{warning.line}: "
                f"{warning.uses} left unpinned ({warning.reason})"
            )

    # ------------------------------------------------------------------
    # scan
    # ------------------------------------------------------------------

    def render_references(self, documents: Sequence[WorkflowDocument], root: Path) -> Table:
        """Render every located reference as a table (offline listing)."""
        table = Table(title="Action References")
        table.add_column("File", style="cyan")
        table.add_column("Line", justify="right")
        table.add_column("Action")
        table.add_column("Ref")
        table.add_column("Pinned", justify="center")

        for document in documents:
            try:
                shown = document.path.relative_to(root)
            except ValueError:
                shown = document.path
            for reference in document.references:
                if reference.is_pinned:
                    pinned = "[green]Yes[/green]"
                    ref = reference.ref[:12]
                    if reference.comment_text:
                        ref = f"{ref} ({reference.comment_text})"
                else:
                    pinned = "[yellow]No[/yellow]"
                    ref = reference.ref
                table.add_row(str(shown), str(reference.line), reference.action, ref, pinned)
        return table
