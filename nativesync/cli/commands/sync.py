"""``nativesync sync`` — fetch, verify and extract natives for a manifest."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel

from nativesync.config import SyncSettings
from nativesync.core.errors import NativeSyncError
from nativesync.core.fetcher import HashedFetcher
from nativesync.core.natives_provider import NativesProvider
from nativesync.models.manifest import NativeManifest

console = Console()


def sync_cmd(
    manifest: Path = typer.Argument(
        ...,
        help="Natives manifest or Minecraft version JSON.",
    ),
    natives_dir: Path = typer.Option(
        None,
        "--natives-dir",
        "-n",
        help="Directory to extract natives into. Defaults to NATIVESYNC_NATIVES_DIR.",
    ),
    cache_dir: Path = typer.Option(
        None,
        "--cache-dir",
        "-c",
        help="Jar store directory. Defaults to NATIVESYNC_JAR_STORE.",
    ),
    offline: bool = typer.Option(
        False,
        "--offline",
        help="Never touch the network; use cached jars only.",
    ),
    refresh: bool = typer.Option(
        False,
        "--refresh",
        help="Re-extract even if every marker is current.",
    ),
) -> None:
    """Bring the natives directory in line with MANIFEST."""
    settings = SyncSettings()
    target = natives_dir or settings.natives_dir
    jar_store = cache_dir or settings.jar_store

    try:
        loaded = NativeManifest.load(manifest)
        with HashedFetcher(
            timeout=settings.http_timeout_seconds,
            user_agent=settings.user_agent,
            chunk_size=settings.chunk_size,
        ) as fetcher:
            provider = NativesProvider(settings, fetcher=fetcher)
            result = provider.sync(
                loaded,
                target,
                jar_store,
                allow_network=not (offline or settings.offline),
                force_refresh=refresh or settings.refresh_dependencies,
            )
    except NativeSyncError as exc:
        console.print(f"[red]Natives sync failed:[/red] {exc}")
        raise typer.Exit(code=1)

    if result.skipped:
        console.print(f"[dim]Natives are up to date in {target}[/dim]")
        return

    console.print(
        Panel(
            "\n".join([
                f"[bold green]Natives extracted[/bold green]",
                "",
                f"[bold]Natives dir:[/bold]  {target}",
                f"[bold]Jar store:[/bold]    {jar_store}",
                f"[bold]Platform:[/bold]     {provider.platform}",
                f"[bold]Extracted:[/bold]    {len(result.extracted)}",
                f"[bold]Downloaded:[/bold]   {len(result.downloaded)}",
            ]),
            title="[bold]nativesync[/bold]",
            border_style="green",
            padding=(1, 2),
        )
    )
