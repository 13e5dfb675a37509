"""Native artifact manifest models.

An ``ArtifactSpec`` describes one downloadable native-library bundle: where
to fetch it, the SHA-1 its bytes must hash to, which host it applies to and
where it lives under the jar store. A ``NativeManifest`` is the ordered list
of those specs for one game version.

Manifests arrive already parsed. ``NativeManifest.from_version_json`` also
accepts the ``libraries`` section of a Minecraft version JSON and expands
each library's per-OS classifiers into specs.
"""

from __future__ import annotations

import json
import re
from pathlib import Path, PurePosixPath
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from nativesync.core.errors import ConfigurationError
from nativesync.models.platform import Arch, HostOS

_SHA1_PATTERN = re.compile(r"^[0-9a-fA-F]{40}$")
_ARCH_PLACEHOLDER = "${arch}"
_ARCHES: tuple[Arch, ...] = ("32", "64")


class ArtifactSpec(BaseModel):
    """A single native artifact, read-only to the sync core.

    ``os`` and ``arch`` of ``None`` mean the artifact applies to every OS
    or every pointer width respectively.
    """

    model_config = ConfigDict(frozen=True)

    identifier: str
    url: str
    sha1: str
    path: str
    os: HostOS | None = None
    arch: Arch | None = None
    exclude: tuple[str, ...] = ()
    size: int | None = None

    @field_validator("sha1")
    @classmethod
    def _check_sha1(cls, value: str) -> str:
        value = value.strip()
        if not _SHA1_PATTERN.match(value):
            raise ValueError(f"sha1 must be 40 hexadecimal characters, got {value!r}")
        return value

    @field_validator("path")
    @classmethod
    def _check_path(cls, value: str) -> str:
        rel = PurePosixPath(value.replace("\\", "/"))
        if not rel.parts or rel.is_absolute() or ".." in rel.parts:
            raise ValueError(f"path must be relative to the jar store, got {value!r}")
        return rel.as_posix()

    @property
    def file_name(self) -> str:
        """Basename of the cached jar, e.g. ``lwjgl.jar``."""
        return PurePosixPath(self.path).name

    @property
    def marker_name(self) -> str:
        """Name of the extraction marker written into the natives directory."""
        return f"{self.file_name}.sha1"

    def cache_file(self, cache_root: Path) -> Path:
        """Location of the downloaded jar under *cache_root*."""
        return Path(cache_root).joinpath(*PurePosixPath(self.path).parts)


class NativeManifest(BaseModel):
    """Ordered collection of native artifacts for one game version."""

    model_config = ConfigDict(frozen=True)

    artifacts: tuple[ArtifactSpec, ...] = ()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @classmethod
    def from_version_json(cls, data: Mapping[str, Any]) -> NativeManifest:
        """Build a manifest from a Minecraft version JSON document.

        Only libraries declaring a ``natives`` map contribute. A classifier
        containing ``${arch}`` yields one artifact per pointer width; libraries
        whose ``rules`` disallow an OS produce no artifact for that OS.
        """
        libraries = data.get("libraries")
        if not isinstance(libraries, list):
            raise ConfigurationError("Version JSON has no 'libraries' list")

        artifacts: list[ArtifactSpec] = []
        for index, library in enumerate(libraries):
            if not isinstance(library, Mapping):
                raise ConfigurationError(
                    f"Library #{index} in version JSON must be an object, got {type(library).__name__}"
                )
            natives = library.get("natives")
            if not natives:
                continue
            name = library.get("name", f"#{index}")
            try:
                artifacts.extend(_library_artifacts(name, library, natives))
            except (AttributeError, TypeError) as exc:
                raise ConfigurationError(f"Malformed natives entry for library {name}: {exc}") from exc

        return cls(artifacts=tuple(artifacts))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> NativeManifest:
        """Accept either ``{"artifacts": [...]}`` or a version JSON."""
        if "libraries" in data:
            return cls.from_version_json(data)
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid natives manifest: {exc}") from exc

    @classmethod
    def load(cls, path: Path) -> NativeManifest:
        """Read a manifest JSON file from disk."""
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise ConfigurationError(f"Could not read natives manifest at {path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Natives manifest at {path} is not valid JSON: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigurationError(f"Natives manifest at {path} must be a JSON object")
        return cls.from_dict(data)


def _rules_allow(rules: list[dict[str, Any]] | None, os_name: str) -> bool:
    """Evaluate a version JSON rule list for *os_name*; the last match wins."""
    if not rules:
        return True
    allowed = False
    for rule in rules:
        rule_os = rule.get("os", {}).get("name")
        if rule_os is not None and rule_os != os_name:
            continue
        allowed = rule.get("action") == "allow"
    return allowed


def _expect_mapping(value: Any, what: str, name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(
            f"{what} of library {name} must be an object, got {type(value).__name__}"
        )
    return value


def _library_artifacts(
    name: str,
    library: Mapping[str, Any],
    natives: Any,
) -> list[ArtifactSpec]:
    """Expand one version JSON library into its per-OS native artifacts."""
    natives = _expect_mapping(natives, "'natives'", name)
    downloads = _expect_mapping(library.get("downloads", {}), "'downloads'", name)
    classifiers = _expect_mapping(downloads.get("classifiers", {}), "'downloads.classifiers'", name)
    extract = _expect_mapping(library.get("extract", {}), "'extract'", name)
    exclude = tuple(extract.get("exclude", []))

    artifacts: list[ArtifactSpec] = []
    for os_name, template in natives.items():
        if not _rules_allow(library.get("rules"), os_name):
            continue
        if _ARCH_PLACEHOLDER in template:
            variants = [(arch, template.replace(_ARCH_PLACEHOLDER, arch)) for arch in _ARCHES]
        else:
            variants = [(None, template)]

        for arch, classifier in variants:
            download = classifiers.get(classifier)
            if download is None:
                continue
            download = _expect_mapping(download, f"Classifier {classifier!r}", name)
            try:
                artifacts.append(
                    ArtifactSpec(
                        identifier=f"{name}:{classifier}",
                        url=download["url"],
                        sha1=download["sha1"],
                        path=download["path"],
                        os=os_name,
                        arch=arch,
                        exclude=exclude,
                        size=download.get("size"),
                    )
                )
            except (KeyError, ValidationError) as exc:
                raise ConfigurationError(
                    f"Invalid native classifier {classifier!r} for library {name}: {exc}"
                ) from exc
    return artifacts
