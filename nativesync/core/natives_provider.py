"""Natives provider — the coordinator for a natives sync.

The NativesProvider wires together platform filtering, the hashed fetcher,
jar unpacking and the extraction markers. A sync either returns early
because every marker matches the manifest, or wipes the natives directory
and rebuilds it artifact by artifact.

Staleness is decided for the directory as a whole: one stale artifact
rebuilds all of them. Jars already present in the store with the right
SHA-1 are not downloaded again, so a rebuild costs only local unpacking.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from nativesync.config import SyncSettings
from nativesync.core.errors import ConfigurationError, MissingArtifactError, SyncIOError
from nativesync.core.extraction_state import ExtractionStateTracker
from nativesync.core.fetcher import HashedFetcher
from nativesync.core.host_platform import applicable_artifacts, current_platform
from nativesync.core.unpacker import unpack_archive
from nativesync.models.manifest import ArtifactSpec, NativeManifest
from nativesync.models.platform import HostPlatform
from nativesync.models.sync import SyncResult

logger = logging.getLogger(__name__)


class NativesProvider:
    """Keeps a natives directory in step with a manifest.

    Parameters
    ----------
    settings:
        Directory and flag defaults used by ``provide``. Loaded from the
        environment if not provided.
    fetcher:
        Downloader for the jar store. Built from *settings* if omitted.
    tracker:
        Extraction marker reader/writer.
    platform:
        Host to select artifacts for. Detected if omitted.
    """

    def __init__(
        self,
        settings: SyncSettings | None = None,
        *,
        fetcher: HashedFetcher | None = None,
        tracker: ExtractionStateTracker | None = None,
        platform: HostPlatform | None = None,
    ) -> None:
        self.settings = settings or SyncSettings()
        self.fetcher = fetcher or HashedFetcher(
            timeout=self.settings.http_timeout_seconds,
            user_agent=self.settings.user_agent,
            chunk_size=self.settings.chunk_size,
        )
        self.tracker = tracker or ExtractionStateTracker()
        self.platform = platform or current_platform()

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def provide(self, manifest: NativeManifest | None = None) -> SyncResult:
        """Sync using directories and flags from ``self.settings``.

        A configured ``custom_natives_dir`` replaces syncing altogether; it
        only has to exist.
        """
        custom = self.settings.custom_natives_dir
        if custom is not None:
            if not custom.exists():
                raise ConfigurationError(
                    f"Could not find custom natives directory at {custom.absolute()}"
                )
            logger.info("Using custom natives directory %s", custom)
            return SyncResult(target_dir=custom, skipped=True)

        if manifest is None:
            if self.settings.manifest_path is None:
                raise ConfigurationError(
                    "No natives manifest given; set NATIVESYNC_MANIFEST_PATH"
                )
            manifest = NativeManifest.load(self.settings.manifest_path)

        return self.sync(
            manifest,
            self.settings.natives_dir,
            self.settings.jar_store,
            allow_network=not self.settings.offline,
            force_refresh=self.settings.refresh_dependencies,
        )

    def sync(
        self,
        manifest: NativeManifest,
        target_dir: Path,
        cache_root: Path,
        allow_network: bool = True,
        force_refresh: bool = False,
    ) -> SyncResult:
        """Make *target_dir* hold exactly the unpacked natives of *manifest*.

        Lifecycle:
        1. Select the artifacts that apply to this host
        2. Return early if nothing is stale (and no refresh was forced)
        3. Delete and recreate *target_dir*
        4. Per artifact: fetch, check the jar exists, unpack, write marker

        A failure in step 4 leaves *target_dir* partially populated; the
        missing markers make the next run rebuild it.
        """
        target_dir = Path(target_dir)
        cache_root = Path(cache_root)
        self._check_roots(target_dir, cache_root)

        artifacts = applicable_artifacts(manifest, self.platform)

        if not force_refresh and not self.requires_extract(artifacts, target_dir):
            logger.info("Natives do not need extracting, skipping")
            return SyncResult(target_dir=target_dir, skipped=True)

        logger.info(
            "Extracting %d native artifacts into %s%s",
            len(artifacts),
            target_dir,
            "" if allow_network else " (offline)",
        )
        self._reset_target_dir(target_dir)

        downloaded: list[str] = []
        extracted: list[str] = []
        for artifact in artifacts:
            if self._extract(artifact, target_dir, cache_root, allow_network):
                downloaded.append(artifact.identifier)
            extracted.append(artifact.identifier)

        return SyncResult(
            target_dir=target_dir,
            downloaded=tuple(downloaded),
            extracted=tuple(extracted),
        )

    # ------------------------------------------------------------------
    # Query methods
    # ------------------------------------------------------------------

    def requires_extract(self, artifacts: list[ArtifactSpec], target_dir: Path) -> bool:
        """True if *target_dir* is missing or any artifact's marker is stale."""
        if not Path(target_dir).is_dir():
            return True
        return any(self.tracker.is_stale(artifact, target_dir) for artifact in artifacts)

    def status(
        self, manifest: NativeManifest, target_dir: Path
    ) -> list[tuple[ArtifactSpec, bool]]:
        """Per applicable artifact, whether its marker is stale. No side effects."""
        target_dir = Path(target_dir)
        return [
            (artifact, self.tracker.is_stale(artifact, target_dir))
            for artifact in applicable_artifacts(manifest, self.platform)
        ]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _check_roots(target_dir: Path, cache_root: Path) -> None:
        target = target_dir.resolve()
        cache = cache_root.resolve()
        if cache == target or target in cache.parents:
            raise ConfigurationError(
                f"Jar store {cache_root} must not live inside the natives directory {target_dir}"
            )

    @staticmethod
    def _reset_target_dir(target_dir: Path) -> None:
        if target_dir.exists():
            try:
                shutil.rmtree(target_dir)
            except OSError as exc:
                raise SyncIOError(
                    f"Failed to delete the natives directory {target_dir}, is the game running? ({exc})"
                ) from exc
        try:
            target_dir.mkdir(parents=True)
        except OSError as exc:
            raise SyncIOError(f"Failed to create the natives directory {target_dir}: {exc}") from exc

    def _extract(
        self,
        artifact: ArtifactSpec,
        target_dir: Path,
        cache_root: Path,
        allow_network: bool,
    ) -> bool:
        jar = artifact.cache_file(cache_root)
        downloaded = False
        if allow_network:
            downloaded = self.fetcher.ensure_fetched(artifact.url, jar, artifact.sha1, allow_network)

        if not jar.exists():
            raise MissingArtifactError(
                f"Native jar for {artifact.identifier} not found at {jar.absolute()}",
                identifier=artifact.identifier,
                path=jar,
            )

        unpack_archive(jar, target_dir, artifact.exclude)
        self.tracker.mark_extracted(artifact, target_dir)
        logger.debug("Extracted %s", artifact.identifier)
        return downloaded
