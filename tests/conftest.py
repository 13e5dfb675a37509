"""Shared test fixtures for nativesync."""

from __future__ import annotations

import io
import zipfile
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import requests

from nativesync.config import SyncSettings
from nativesync.core.extraction_state import ExtractionStateTracker
from nativesync.core.fetcher import HashedFetcher
from nativesync.core.hasher import sha1_hex
from nativesync.core.natives_provider import NativesProvider
from nativesync.models.manifest import ArtifactSpec, NativeManifest
from nativesync.models.platform import HostPlatform


# ---------------------------------------------------------------------------
# Fake HTTP
# ---------------------------------------------------------------------------


class BrokenStream(io.BytesIO):
    """A response body that drops the connection after the first read."""

    def __init__(self, data: bytes) -> None:
        super().__init__(data)
        self._reads = 0

    def read(self, size: int = -1) -> bytes:
        self._reads += 1
        if self._reads > 1:
            raise requests.ConnectionError("connection reset by peer")
        return super().read(size)


class FakeSession:
    """In-memory stand-in for ``requests.Session``.

    Routes map a URL to response bytes, an exception instance to raise, or a
    callable returning a fresh raw stream.
    """

    def __init__(self) -> None:
        self.routes: dict[str, Any] = {}
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.closed = False

    def add(self, url: str, body: Any, status: int = 200) -> None:
        self.routes[url] = body if isinstance(body, BaseException) else (status, body)

    def get(self, url: str, **kwargs: Any) -> requests.Response:
        self.calls.append((url, kwargs))
        route = self.routes.get(url, (404, b""))
        if isinstance(route, BaseException):
            raise route
        status, body = route

        response = requests.Response()
        response.status_code = status
        response.raw = io.BytesIO(body) if isinstance(body, bytes) else body()
        response.url = url
        response.reason = "OK" if status < 400 else "Error"
        return response

    def close(self) -> None:
        self.closed = True

    @property
    def urls(self) -> list[str]:
        return [url for url, _ in self.calls]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test artifacts."""
    return tmp_path


@pytest.fixture
def natives_dir(tmp_dir: Path) -> Path:
    return tmp_dir / "natives"


@pytest.fixture
def jar_store(tmp_dir: Path) -> Path:
    return tmp_dir / "jars"


@pytest.fixture
def linux_host() -> HostPlatform:
    return HostPlatform(os="linux", arch="64")


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def fetcher(fake_session: FakeSession) -> HashedFetcher:
    """A HashedFetcher wired to the in-memory session."""
    return HashedFetcher(session=fake_session, timeout=5.0)


@pytest.fixture
def tracker() -> ExtractionStateTracker:
    return ExtractionStateTracker()


@pytest.fixture
def settings(natives_dir: Path, jar_store: Path) -> SyncSettings:
    """Settings pointing at temp directories, ignoring the environment file."""
    return SyncSettings(
        _env_file=None,
        natives_dir=natives_dir,
        jar_store=jar_store,
    )


@pytest.fixture
def provider(
    settings: SyncSettings,
    fetcher: HashedFetcher,
    linux_host: HostPlatform,
) -> NativesProvider:
    """A NativesProvider for a simulated 64-bit Linux host."""
    return NativesProvider(settings, fetcher=fetcher, platform=linux_host)


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def build_jar(files: dict[str, bytes]) -> bytes:
    """Zip *files* (name -> content) into jar bytes."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, content in files.items():
            zf.writestr(name, content)
    return buffer.getvalue()


@pytest.fixture
def make_jar() -> Callable[..., bytes]:
    """Factory fixture: jar bytes with a native library and a manifest entry."""

    def _factory(files: dict[str, bytes] | None = None) -> bytes:
        return build_jar(files or {
            "liblwjgl.so": b"\x7fELF lwjgl",
            "META-INF/MANIFEST.MF": b"Manifest-Version: 1.0\n",
        })

    return _factory


@pytest.fixture
def make_artifact() -> Callable[..., ArtifactSpec]:
    """Factory fixture: an ArtifactSpec whose sha1 matches *content*."""

    def _factory(
        name: str = "lwjgl",
        content: bytes = b"",
        **overrides: Any,
    ) -> ArtifactSpec:
        defaults: dict[str, Any] = {
            "identifier": f"{name}-natives",
            "url": f"https://example.invalid/{name}.jar",
            "sha1": sha1_hex(content),
            "path": f"org/lwjgl/{name}/{name}.jar",
            "os": "linux",
        }
        defaults.update(overrides)
        return ArtifactSpec(**defaults)

    return _factory


@pytest.fixture
def served_manifest(
    fake_session: FakeSession,
    make_artifact: Callable[..., ArtifactSpec],
) -> Callable[..., tuple[NativeManifest, dict[str, bytes]]]:
    """Factory fixture: register jars with the fake session and return a manifest.

    Takes ``{name: {file: bytes}}`` and returns the manifest plus the jar
    bytes per artifact name.
    """

    def _factory(
        jars: dict[str, dict[str, bytes]],
        **overrides: Any,
    ) -> tuple[NativeManifest, dict[str, bytes]]:
        artifacts = []
        payloads = {}
        for name, files in jars.items():
            payload = build_jar(files)
            artifact = make_artifact(name, payload, **overrides)
            fake_session.add(artifact.url, payload)
            artifacts.append(artifact)
            payloads[name] = payload
        return NativeManifest(artifacts=tuple(artifacts)), payloads

    return _factory


@pytest.fixture
def broken_stream() -> type[BrokenStream]:
    """The BrokenStream class, for routes that fail mid-download."""
    return BrokenStream
