"""Main Typer application — imports and registers all CLI commands.

Entry point: ``nativesync`` (configured via pyproject.toml console_scripts).
"""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from nativesync.cli.commands.platform_cmd import platform_cmd
from nativesync.cli.commands.status import status_cmd
from nativesync.cli.commands.sync import sync_cmd
from nativesync.config import SyncSettings

app = typer.Typer(
    name="nativesync",
    help="nativesync: verified, cached extraction of platform native libraries.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="sync", help="Fetch, verify and extract natives for a manifest.")(sync_cmd)
app.command(name="status", help="Show extraction marker state per artifact.")(status_cmd)
app.command(name="platform", help="Show the detected OS and architecture.")(platform_cmd)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Configure logging before any subcommand runs."""
    level = "DEBUG" if verbose else SyncSettings().log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
