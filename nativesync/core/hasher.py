"""SHA-1 helpers for content addressing native jars and markers.

SHA-1 is what version manifests publish for every download, so it is the
only digest this package computes. Hex digests are compared
case-insensitively.
"""

from __future__ import annotations

import hashlib
from pathlib import Path

_STREAM_CHUNK = 1024 * 1024  # 1 MiB


def sha1_hex(data: bytes) -> str:
    """Return the SHA-1 hex digest of raw bytes."""
    return hashlib.sha1(data).hexdigest()


def sha1_file(path: Path, chunk_size: int = _STREAM_CHUNK) -> str:
    """Stream *path* through SHA-1 without loading it into memory."""
    h = hashlib.sha1()
    with Path(path).open("rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            h.update(chunk)
    return h.hexdigest()


def normalize_digest(value: str) -> str:
    """Strip whitespace and lowercase a hex digest."""
    return value.strip().lower()


def digests_match(left: str, right: str) -> bool:
    """Case-insensitive digest comparison."""
    return normalize_digest(left) == normalize_digest(right)
