"""``pinbump scan`` — list located action references (offline)."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from pinbump.bridge.workspace import list_candidate_files
from pinbump.config import PinbumpConfig
from pinbump.core.orchestrator import load_document
from pinbump.monitor.renderer import SummaryRenderer

console = Console()


def scan_cmd(
    path: Path = typer.Option(
        Path("."),
        "--path",
        "-p",
        help="Repository root (or a single workflow file).",
    ),
) -> None:
    """Show every pinnable reference and whether it is already pinned."""
    settings = PinbumpConfig()
    if not path.exists():
        console.print(f"[bold red]Path not found:[/bold red] {path}")
        raise typer.Exit(code=1)

    documents = [load_document(p) for p in list_candidate_files(path, settings.workflows_dir)]
    if not any(d.references for d in documents):
        console.print("[dim]No action references found.[/dim]")
        return

    renderer = SummaryRenderer(console=console)
    console.print(renderer.render_references(documents, path))

    total = sum(len(d.references) for d in documents)
    unpinned = sum(1 for d in documents for r in d.references if not r.is_pinned)
    console.print(f"\n[bold]{total}[/bold] reference(s), [yellow]{unpinned}[/yellow] unpinned")
