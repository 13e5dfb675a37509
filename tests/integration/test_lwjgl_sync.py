"""Integration test — the full natives lifecycle for a version manifest.

Walks a Minecraft-style version JSON through first sync, idle re-run,
marker tampering, offline rebuild and an upstream natives bump.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from nativesync.config import SyncSettings
from nativesync.core.fetcher import HashedFetcher
from nativesync.core.hasher import sha1_file, sha1_hex
from nativesync.core.natives_provider import NativesProvider
from nativesync.models.manifest import NativeManifest
from nativesync.models.platform import HostPlatform


def _library(name: str, classifiers: dict[str, bytes]) -> dict:
    return {
        "name": f"org.lwjgl:{name}:3.3.1",
        "natives": {"linux": "natives-linux", "windows": "natives-windows-${arch}"},
        "extract": {"exclude": ["META-INF/"]},
        "downloads": {
            "classifiers": {
                classifier: {
                    "path": f"org/lwjgl/{name}/3.3.1/{name}-3.3.1-{classifier}.jar",
                    "sha1": sha1_hex(payload),
                    "size": len(payload),
                    "url": f"https://libraries.example/{name}-{classifier}.jar",
                }
                for classifier, payload in classifiers.items()
            }
        },
    }


@pytest.fixture
def lwjgl_jars(make_jar) -> dict[str, bytes]:
    return {
        "natives-linux": make_jar({
            "liblwjgl.so": b"lwjgl linux",
            "META-INF/MANIFEST.MF": b"Manifest-Version: 1.0\n",
        }),
        "natives-windows-64": make_jar({"lwjgl.dll": b"lwjgl win64"}),
        "natives-windows-32": make_jar({"lwjgl32.dll": b"lwjgl win32"}),
    }


@pytest.fixture
def version_json(lwjgl_jars, make_jar, fake_session, tmp_path: Path) -> Path:
    openal = {"natives-linux": make_jar({"libopenal.so": b"openal linux"})}
    payloads = {sha1_hex(body): body for body in [*lwjgl_jars.values(), *openal.values()]}
    data = {
        "id": "1.19.2",
        "libraries": [
            {"name": "com.mojang:brigadier:1.0.18"},
            _library("lwjgl", lwjgl_jars),
            _library("lwjgl-openal", openal),
        ],
    }
    for library in data["libraries"][1:]:
        for download in library["downloads"]["classifiers"].values():
            fake_session.add(download["url"], payloads[download["sha1"]])

    path = tmp_path / "1.19.2.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestVersionLifecycle:
    def test_full_lifecycle(self, version_json, fake_session, natives_dir, jar_store):
        settings = SyncSettings(
            _env_file=None,
            natives_dir=natives_dir,
            jar_store=jar_store,
            manifest_path=version_json,
        )
        fetcher = HashedFetcher(session=fake_session)
        linux = HostPlatform(os="linux", arch="64")
        provider = NativesProvider(settings, fetcher=fetcher, platform=linux)

        # 1. First sync downloads and extracts only the linux natives
        first = provider.provide()
        assert len(first.extracted) == 2
        assert len(fake_session.calls) == 2
        assert (natives_dir / "liblwjgl.so").read_bytes() == b"lwjgl linux"
        assert (natives_dir / "libopenal.so").read_bytes() == b"openal linux"
        assert not (natives_dir / "lwjgl.dll").exists()
        assert not (natives_dir / "META-INF").exists()

        manifest = NativeManifest.load(version_json)
        for artifact, stale in provider.status(manifest, natives_dir):
            assert stale is False
            assert sha1_file(artifact.cache_file(jar_store)) == artifact.sha1

        # 2. Idle re-run touches nothing
        assert provider.provide().skipped is True
        assert len(fake_session.calls) == 2

        # 3. A tampered marker rebuilds the directory from the jar store
        marker = natives_dir / "lwjgl-3.3.1-natives-linux.jar.sha1"
        marker.write_text("0" * 40, encoding="utf-8")
        offline = NativesProvider(
            settings.model_copy(update={"offline": True}), fetcher=fetcher, platform=linux
        )
        rebuilt = offline.provide()
        assert rebuilt.skipped is False
        assert rebuilt.downloaded == ()
        assert len(fake_session.calls) == 2
        assert marker.read_text(encoding="utf-8") != "0" * 40

    def test_windows_64_selects_arch_variant(self, version_json, fake_session, natives_dir, jar_store):
        provider = NativesProvider(
            SyncSettings(_env_file=None),
            fetcher=HashedFetcher(session=fake_session),
            platform=HostPlatform(os="windows", arch="64"),
        )

        result = provider.sync(NativeManifest.load(version_json), natives_dir, jar_store)

        assert result.extracted == ("org.lwjgl:lwjgl:3.3.1:natives-windows-64",)
        assert (natives_dir / "lwjgl.dll").exists()
        assert not (natives_dir / "lwjgl32.dll").exists()
