"""Hash-checked downloads into the jar store.

A download only happens when the destination is absent or its SHA-1 does
not match. Bytes are streamed into a temporary file beside the destination
and hashed on the way in; the destination is replaced only once the digest
has been verified, so a failed or corrupt transfer never clobbers a good
cached copy.
"""

from __future__ import annotations

import hashlib
import logging
import os
import tempfile
from pathlib import Path

import requests

from nativesync.core.errors import IntegrityError, SyncIOError, TransferError
from nativesync.core.hasher import digests_match, sha1_file

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "nativesync/0.1.0"
_STREAM_CHUNK = 64 * 1024


class HashedFetcher:
    """Downloads artifacts whose local copy is missing or fails its SHA-1.

    Parameters
    ----------
    session:
        A ``requests.Session`` (or compatible object). A private session is
        created and owned when omitted.
    timeout:
        Connect/read timeout in seconds passed to every request.
    user_agent:
        ``User-Agent`` header sent with every request.
    chunk_size:
        Streaming chunk size in bytes.
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        timeout: float = 60.0,
        user_agent: str = DEFAULT_USER_AGENT,
        chunk_size: int = _STREAM_CHUNK,
    ) -> None:
        self._owns_session = session is None
        self._session = session if session is not None else requests.Session()
        self._timeout = timeout
        self._headers = {"User-Agent": user_agent, "Accept": "*/*"}
        self._chunk_size = chunk_size

    def close(self) -> None:
        """Close the session if this fetcher created it."""
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> HashedFetcher:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    def is_valid(self, destination: Path, expected_sha1: str) -> bool:
        """True if *destination* exists and hashes to *expected_sha1*."""
        destination = Path(destination)
        if not destination.is_file():
            return False
        try:
            actual = sha1_file(destination)
        except OSError as exc:
            logger.warning("Could not hash %s, it will be downloaded again: %s", destination, exc)
            return False
        return digests_match(actual, expected_sha1)

    # ------------------------------------------------------------------
    # Fetch
    # ------------------------------------------------------------------

    def ensure_fetched(
        self,
        url: str,
        destination: Path,
        expected_sha1: str,
        allow_network: bool,
    ) -> bool:
        """Make *destination* hold the bytes of *url* hashing to *expected_sha1*.

        Returns True if a download happened. With *allow_network* False this
        does nothing at all; detecting a missing file is the caller's job.

        Raises
        ------
        TransferError
            Connection failure, timeout or non-success HTTP status.
        IntegrityError
            The downloaded bytes do not hash to *expected_sha1*.
        SyncIOError
            The jar store could not be written.
        """
        destination = Path(destination)
        if not allow_network:
            logger.debug("Offline, not fetching %s", url)
            return False

        if self.is_valid(destination, expected_sha1):
            logger.debug("%s is up to date (sha1 %s)", destination, expected_sha1)
            return False

        logger.info("Downloading %s to %s", url, destination)
        self._download(url, destination, expected_sha1)
        return True

    def _download(self, url: str, destination: Path, expected_sha1: str) -> None:
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise SyncIOError(f"Could not create jar store directory {destination.parent}: {exc}") from exc

        try:
            response = self._session.get(
                url,
                headers=self._headers,
                timeout=self._timeout,
                stream=True,
            )
        except requests.RequestException as exc:
            raise TransferError(f"Failed to download {url}: {exc}", url=url) from exc

        digest = hashlib.sha1()
        tmp_path: Path | None = None
        try:
            with response:
                status = response.status_code
                if not 200 <= status < 300:
                    raise TransferError(
                        f"Failed to download {url}: HTTP {status}",
                        url=url,
                        status_code=status,
                    )
                with tempfile.NamedTemporaryFile(
                    prefix=f".{destination.name}.",
                    suffix=".part",
                    delete=False,
                    dir=str(destination.parent),
                ) as tf:
                    tmp_path = Path(tf.name)
                    for chunk in response.iter_content(chunk_size=self._chunk_size):
                        if chunk:
                            digest.update(chunk)
                            tf.write(chunk)
        except requests.RequestException as exc:
            _discard(tmp_path)
            raise TransferError(f"Failed to download {url}: {exc}", url=url) from exc
        except OSError as exc:
            _discard(tmp_path)
            raise SyncIOError(f"Could not write download of {url} near {destination}: {exc}") from exc
        except BaseException:
            _discard(tmp_path)
            raise

        actual = digest.hexdigest()
        if not digests_match(actual, expected_sha1):
            _discard(tmp_path)
            raise IntegrityError(
                f"Hash mismatch for {url}: expected sha1 {expected_sha1}, got {actual}",
                expected=expected_sha1,
                actual=actual,
            )

        try:
            os.replace(tmp_path, destination)
        except OSError as exc:
            _discard(tmp_path)
            raise SyncIOError(f"Could not move verified download into {destination}: {exc}") from exc
        logger.debug("Verified %s (sha1 %s)", destination, actual)


def _discard(path: Path | None) -> None:
    if path is None:
        return
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("Could not remove temporary download %s: %s", path, exc)
