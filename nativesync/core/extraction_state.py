"""Per-artifact extraction markers.

After an artifact's jar has been fully unpacked into the natives directory,
a ``<jar name>.sha1`` file holding the jar's SHA-1 is written beside the
extracted files. On the next run the markers alone decide whether the
directory is current, without touching the network or the jar store.
Markers are keyed by jar file name alone; manifest filtering rejects two
applicable jars that share a name.
"""

from __future__ import annotations

import logging
from pathlib import Path

from nativesync.core.errors import SyncIOError
from nativesync.core.hasher import digests_match
from nativesync.models.manifest import ArtifactSpec

logger = logging.getLogger(__name__)


class ExtractionStateTracker:
    """Reads and writes extraction markers inside a natives directory."""

    def marker_path(self, artifact: ArtifactSpec, target_dir: Path) -> Path:
        return Path(target_dir) / artifact.marker_name

    def read_marker(self, artifact: ArtifactSpec, target_dir: Path) -> str | None:
        """Return the recorded SHA-1, or None if no marker exists.

        Read errors propagate; ``is_stale`` is where they become "stale".
        """
        path = self.marker_path(artifact, target_dir)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8").strip()

    def is_stale(self, artifact: ArtifactSpec, target_dir: Path) -> bool:
        """True unless a readable marker records ``artifact.sha1``."""
        try:
            recorded = self.read_marker(artifact, target_dir)
        except (OSError, UnicodeDecodeError) as exc:
            logger.error(
                "Failed to read %s, treating %s as stale: %s",
                self.marker_path(artifact, target_dir),
                artifact.identifier,
                exc,
            )
            return True

        if recorded is None:
            logger.debug("No extraction marker for %s", artifact.identifier)
            return True
        if not digests_match(recorded, artifact.sha1):
            logger.debug(
                "Marker for %s records %s, manifest wants %s",
                artifact.identifier,
                recorded,
                artifact.sha1,
            )
            return True
        return False

    def mark_extracted(self, artifact: ArtifactSpec, target_dir: Path) -> Path:
        """Record that *artifact* is unpacked in *target_dir*.

        Must only be called once the unpack has completed.
        """
        path = self.marker_path(artifact, target_dir)
        try:
            path.write_text(artifact.sha1, encoding="utf-8")
        except OSError as exc:
            raise SyncIOError(f"Failed to write extraction marker {path}: {exc}") from exc
        return path
