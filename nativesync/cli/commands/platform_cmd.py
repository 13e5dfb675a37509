"""``nativesync platform`` — show the detected host platform."""

from __future__ import annotations

from rich.console import Console

from nativesync.core.host_platform import current_platform, is_ci_build

console = Console()


def platform_cmd() -> None:
    """Print the OS family and pointer width natives are selected for."""
    host = current_platform()
    console.print(f"[bold]OS:[/bold]   {host.os}")
    console.print(f"[bold]Arch:[/bold] {host.arch}")
    console.print(f"[bold]CI:[/bold]   {'yes' if is_ci_build() else 'no'}")
