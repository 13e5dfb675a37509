"""Host platform detection and manifest filtering.

The running OS is reduced to the three families version manifests know
about (``windows``, ``osx``, ``linux``) and the interpreter's pointer width
to ``32`` or ``64``. Detection runs once per process; tests pass an
explicit ``HostPlatform`` instead.
"""

from __future__ import annotations

import logging
import os
import platform
import sys
from collections.abc import Mapping
from functools import lru_cache

from nativesync.core.errors import ConfigurationError
from nativesync.models.manifest import ArtifactSpec, NativeManifest
from nativesync.models.platform import Arch, HostOS, HostPlatform

logger = logging.getLogger(__name__)


def classify_os(os_name: str) -> HostOS:
    """Map an OS name (``platform.system()`` or a JVM ``os.name``) to a family."""
    name = os_name.lower()
    # "darwin" contains "win", so macOS must be checked first
    if "mac" in name or "darwin" in name:
        return "osx"
    if "win" in name:
        return "windows"
    return "linux"


def classify_arch(bits: int) -> Arch:
    """Map a pointer width in bits to the manifest's ``${arch}`` value."""
    return "64" if bits >= 64 else "32"


def detect_host_platform(
    system: str | None = None,
    bits: int | None = None,
) -> HostPlatform:
    """Classify *system* and *bits*, defaulting to the running interpreter."""
    if system is None:
        system = platform.system()
    if bits is None:
        bits = 64 if sys.maxsize > 2**32 else 32
    return HostPlatform(os=classify_os(system), arch=classify_arch(bits))


@lru_cache(maxsize=1)
def current_platform() -> HostPlatform:
    """The running host, detected once per process."""
    host = detect_host_platform()
    logger.debug("Detected host platform %s", host)
    return host


def is_ci_build(env: Mapping[str, str] | None = None) -> bool:
    """Whether this process runs under a CI service.

    ``NATIVESYNC_CI`` overrides detection; otherwise the ``CI`` variable
    set by most CI services decides.
    """
    env = os.environ if env is None else env
    override = env.get("NATIVESYNC_CI")
    if override is not None:
        return override.strip().lower() == "true"
    return env.get("CI") is not None


def applicable_artifacts(
    manifest: NativeManifest,
    host: HostPlatform | None = None,
) -> list[ArtifactSpec]:
    """Return the manifest entries that apply to *host*, in manifest order.

    An entry applies when its ``os`` and ``arch`` are unset or equal the
    host's. Callers only pass manifests that require natives, so an empty
    result means the platform is unsupported or the manifest is corrupt.

    Raises
    ------
    ConfigurationError
        If no entry applies to *host*, or two applicable entries with
        different paths share a jar file name.
    """
    host = host or current_platform()
    selected = [
        artifact
        for artifact in manifest.artifacts
        if (artifact.os is None or artifact.os == host.os)
        and (artifact.arch is None or artifact.arch == host.arch)
    ]
    if not selected:
        raise ConfigurationError(
            f"No natives found for the current system ({host}): "
            f"none of the {len(manifest.artifacts)} manifest entries apply"
        )

    seen: dict[str, ArtifactSpec] = {}
    for artifact in selected:
        other = seen.setdefault(artifact.file_name, artifact)
        if other.path != artifact.path:
            raise ConfigurationError(
                f"Natives {other.identifier} and {artifact.identifier} share the jar name "
                f"{artifact.file_name!r}; their extraction markers would collide"
            )

    logger.debug(
        "%d of %d native artifacts apply to %s",
        len(selected),
        len(manifest.artifacts),
        host,
    )
    return selected
