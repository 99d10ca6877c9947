"""
Host profile model — which distribution family we are running on.

The profile is derived once per run from ``/etc/os-release`` and never
changes afterwards. It selects the package-manager adapter and the
per-family install procedures of every tool.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class Profile(str, Enum):
    """Closed set of host classifications."""

    ARCH = "arch-family"
    DEBIAN = "debian-family"
    UNKNOWN = "unknown"

    @property
    def supported(self) -> bool:
        return self is not Profile.UNKNOWN


class HostInfo(BaseModel):
    """Static host identification, as read from the os-release file."""

    id: str = ""
    id_like: list[str] = Field(default_factory=list)
    version_id: str = ""
    pretty_name: str = ""

    @property
    def display_name(self) -> str:
        if self.pretty_name:
            return self.pretty_name
        if self.version_id:
            return f"{self.id} {self.version_id}"
        return self.id or "unknown"
