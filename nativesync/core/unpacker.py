"""Jar unpacking into the natives directory."""

from __future__ import annotations

import logging
import shutil
import zipfile
import zlib
from collections.abc import Iterable
from pathlib import Path

from nativesync.core.errors import IntegrityError, SyncIOError

logger = logging.getLogger(__name__)


def unpack_archive(
    archive: Path,
    target_dir: Path,
    exclude: Iterable[str] = (),
) -> list[Path]:
    """Extract every member of *archive* into *target_dir*.

    Members whose name starts with one of the *exclude* prefixes (typically
    ``META-INF/``) are skipped. Existing files are overwritten. Returns the
    extracted file paths.

    Raises
    ------
    IntegrityError
        The archive is corrupt or uses an unsupported compression method,
        or a member would land outside *target_dir*.
    SyncIOError
        Reading the archive or writing into *target_dir* failed.
    """
    excluded = tuple(exclude)
    root = Path(target_dir).resolve()
    extracted: list[Path] = []

    try:
        with zipfile.ZipFile(archive) as zf:
            for info in zf.infolist():
                name = info.filename
                if excluded and name.startswith(excluded):
                    continue

                dest = (root / name).resolve()
                if dest != root and root not in dest.parents:
                    raise IntegrityError(f"Refusing to extract {name!r} from {archive}: path escapes {root}")

                if info.is_dir():
                    dest.mkdir(parents=True, exist_ok=True)
                    continue

                dest.parent.mkdir(parents=True, exist_ok=True)
                with zf.open(info) as src, dest.open("wb") as dst:
                    shutil.copyfileobj(src, dst)
                extracted.append(dest)
    except (zipfile.BadZipFile, zlib.error, EOFError) as exc:
        raise IntegrityError(f"{archive} is not a valid jar: {exc}") from exc
    except NotImplementedError as exc:
        raise IntegrityError(f"{archive} uses an unsupported compression method: {exc}") from exc
    except OSError as exc:
        raise SyncIOError(f"Failed to unpack {archive} into {root}: {exc}") from exc

    logger.debug("Unpacked %d files from %s", len(extracted), archive)
    return extracted
