"""nativesync data models — all Pydantic v2, all frozen (immutable)."""

from nativesync.models.manifest import ArtifactSpec, NativeManifest
from nativesync.models.platform import Arch, HostOS, HostPlatform
from nativesync.models.sync import SyncResult

__all__ = [
    # manifest
    "ArtifactSpec",
    "NativeManifest",
    # platform
    "Arch",
    "HostOS",
    "HostPlatform",
    # sync
    "SyncResult",
]
