"""Host platform model: OS family and pointer width."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

HostOS = Literal["windows", "osx", "linux"]
Arch = Literal["32", "64"]


class HostPlatform(BaseModel):
    """The OS family and CPU width that native artifacts are selected for."""

    model_config = ConfigDict(frozen=True)

    os: HostOS
    arch: Arch

    def __str__(self) -> str:
        return f"{self.os}-{self.arch}"
