"""Main Typer application — imports and registers all CLI commands.

Entry point: ``pinbump`` (configured via pyproject.toml console_scripts).
"""

from __future__ import annotations

import typer

from pinbump.cli.commands.pin import pin_cmd
from pinbump.cli.commands.scan import scan_cmd

app = typer.Typer(
    name="pinbump",
    help="Pin GitHub Actions to commit SHAs and optionally update to latest versions.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="pin", help="Pin action references to commit SHAs.")(pin_cmd)
app.command(name="scan", help="List action references without contacting GitHub.")(scan_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
