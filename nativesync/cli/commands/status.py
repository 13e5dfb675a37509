"""``nativesync status`` — show which natives would be re-extracted."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from nativesync.config import SyncSettings
from nativesync.core.errors import NativeSyncError
from nativesync.core.natives_provider import NativesProvider
from nativesync.models.manifest import NativeManifest

console = Console()


def status_cmd(
    manifest: Path = typer.Argument(..., help="Natives manifest or Minecraft version JSON."),
    natives_dir: Path = typer.Option(
        None, "--natives-dir", "-n", help="Natives directory to inspect."
    ),
) -> None:
    """List applicable artifacts and whether their extraction marker is current."""
    settings = SyncSettings()
    target = natives_dir or settings.natives_dir
    provider = NativesProvider(settings)

    try:
        rows = provider.status(NativeManifest.load(manifest), target)
    except NativeSyncError as exc:
        console.print(f"[red]Status failed:[/red] {exc}")
        raise typer.Exit(code=1)
    finally:
        provider.fetcher.close()

    table = Table(title=f"Natives in {target}")
    table.add_column("Artifact", style="cyan")
    table.add_column("Jar")
    table.add_column("SHA-1", style="dim")
    table.add_column("State", justify="center")

    stale_count = 0
    for artifact, stale in rows:
        stale_count += stale
        state = "[yellow]stale[/yellow]" if stale else "[green]current[/green]"
        table.add_row(artifact.identifier, artifact.file_name, artifact.sha1[:12], state)

    console.print(table)
    if stale_count:
        console.print(f"[yellow]{stale_count} artifact(s) need extracting.[/yellow]")
    else:
        console.print("[green]All natives are current.[/green]")
