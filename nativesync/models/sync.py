"""Outcome of a natives sync."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict


class SyncResult(BaseModel):
    """What a call to ``NativesProvider.sync`` did.

    ``skipped`` is True when every marker matched and nothing was touched.
    ``downloaded`` lists artifacts fetched over the network; ``extracted``
    lists artifacts unpacked into ``target_dir``, in manifest order.
    """

    model_config = ConfigDict(frozen=True)

    target_dir: Path
    skipped: bool = False
    downloaded: tuple[str, ...] = ()
    extracted: tuple[str, ...] = ()
