"""``pinbump pin`` — pin every action reference to a commit SHA.

Discovers workflow files under ``--path``, resolves each ``uses:`` reference
through the GitHub API and rewrites it as ``owner/repo@<sha> # <tag>``.  With
``--update`` references are first advanced to the latest release.  Files are
only written when their content changes, and nothing is written if the run
hits a transport failure.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from pinbump.bridge.github import build_client
from pinbump.bridge.workspace import list_candidate_files
from pinbump.cli._logging import configure_logging
from pinbump.config import PinbumpConfig
from pinbump.core.errors import TransportFailure
from pinbump.core.orchestrator import RunOrchestrator
from pinbump.core.resolver import ResolveMode, Resolver
from pinbump.monitor.renderer import SummaryRenderer

console = Console()


def pin_cmd(
    update: bool = typer.Option(
        False,
        "--update",
        "-u",
        help="Update every reference to its repository's latest release.",
    ),
    path: Path = typer.Option(
        Path("."),
        "--path",
        "-p",
        help="Repository root (or a single workflow file).",
    ),
    workers: int = typer.Option(
        None,
        "--workers",
        "-w",
        min=1,
        help="Concurrent API lookups (default: PINBUMP_MAX_WORKERS or 8).",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Resolve and report changes without writing files.",
    ),
    log_level: str = typer.Option(
        None,
        "--log-level",
        help="Log level (default: PINBUMP_LOG_LEVEL or INFO).",
    ),
) -> None:
    """Pin GitHub Actions references to immutable commit SHAs.

    Already pinned references are left alone unless --update is given.
    References that cannot be resolved are skipped with a warning.
    """
    settings = PinbumpConfig()
    configure_logging(log_level or settings.log_level)

    if not path.exists():
        console.print(f"[bold red]Path not found:[/bold red] {path}")
        raise typer.Exit(code=1)

    files = list_candidate_files(path, settings.workflows_dir)
    if not files:
        console.print(f"[dim]No workflow files found in {path / settings.workflows_dir}[/dim]")
        raise typer.Exit(code=0)

    mode = ResolveMode.UPDATE if update else ResolveMode.PIN
    client = build_client(settings)
    try:
        orchestrator = RunOrchestrator(
            Resolver(client),
            mode=mode,
            max_workers=workers or settings.max_workers,
            dry_run=dry_run,
        )
        summary = orchestrator.run(files)
    except TransportFailure as exc:
        console.print(f"[bold red]Aborted:[/bold red] {exc}")
        console.print("[dim]No files were written.[/dim]")
        raise typer.Exit(code=1)
    except (OSError, UnicodeDecodeError) as exc:
        console.print(f"[bold red]I/O error:[/bold red] {exc}")
        raise typer.Exit(code=1)
    finally:
        client.close()

    renderer = SummaryRenderer(console=console)
    for result in summary.files:
        renderer.print_file_changes(result)
    renderer.print_summary(summary)
