"""nativesync CLI — Typer-based command-line interface.

Provides the ``nativesync`` command with subcommands for syncing a natives
directory, inspecting marker state and showing the detected platform.

All output uses Rich for formatted terminal display.
"""
