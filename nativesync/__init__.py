"""nativesync: verified, content-addressed extraction of native libraries.

Keeps a directory of platform-specific native libraries (LWJGL and friends)
in step with a game version's manifest:
  - Host OS/arch filtering of manifest entries
  - SHA-1 checked downloads into a jar store, never clobbering a good copy
  - Per-artifact ``.sha1`` markers so unchanged builds skip all work
  - Offline mode and forced refresh as explicit sync arguments
"""

__version__ = "0.1.0"
__description__ = "Verified, cached extraction of platform native libraries"

from nativesync.core.natives_provider import NativesProvider
from nativesync.models.manifest import ArtifactSpec, NativeManifest
from nativesync.cli.app import app as cli

__all__ = ["NativesProvider", "ArtifactSpec", "NativeManifest", "cli", "__version__"]
