"""Settings — env-driven, with optional .env file.

Reads ``NATIVESYNC_*`` environment variables. Offline and refresh flags live
here only for ``NativesProvider.provide``; ``NativesProvider.sync`` takes
them as explicit arguments.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class SyncSettings(BaseSettings):
    """Natives sync settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export NATIVESYNC_OFFLINE=true
        export NATIVESYNC_NATIVES_DIR=/data/natives
        export NATIVESYNC_LOG_LEVEL=DEBUG

    Or via .env file::

        NATIVESYNC_JAR_STORE=/data/jars
        NATIVESYNC_REFRESH_DEPENDENCIES=true
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="NATIVESYNC_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"

    # Storage paths
    natives_dir: Path = Path(".nativesync/natives")
    jar_store: Path = Path(".nativesync/jars")
    manifest_path: Path | None = None
    # A user-supplied natives directory disables syncing entirely
    custom_natives_dir: Path | None = None

    # Build invocation flags
    offline: bool = False
    refresh_dependencies: bool = False

    # HTTP
    http_timeout_seconds: float = 60.0
    user_agent: str = "nativesync/0.1.0"
    chunk_size: int = 64 * 1024


# Module-level singleton: import as `from nativesync.config import settings`
settings = SyncSettings()
