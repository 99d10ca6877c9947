"""
Detect use case — report the host profile without changing anything.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from devsetup.adapters.registry import default_registry
from devsetup.adapters.shell.command import CommandRunner
from devsetup.core.engine.prober import detect_profile
from devsetup.core.models.profile import HostInfo, Profile
from devsetup.core.models.settings import Settings


@dataclass
class DetectResult:
    """Result of probing the host."""

    profile: Profile = Profile.UNKNOWN
    host: HostInfo | None = None
    os_release: Path | None = None
    package_manager: str | None = None

    @property
    def supported(self) -> bool:
        return self.profile.supported

    def to_dict(self) -> dict:
        return {
            "profile": self.profile.value,
            "supported": self.supported,
            "os_release": str(self.os_release) if self.os_release else None,
            "package_manager": self.package_manager,
            "host": self.host.model_dump() if self.host else None,
        }


def run_detect(settings: Settings) -> DetectResult:
    """Probe ``settings.os_release`` and name the matching package manager."""
    os_release = Path(settings.os_release).expanduser()
    profile, host = detect_profile(os_release)
    result = DetectResult(profile=profile, host=host, os_release=os_release)

    registry = default_registry()
    if registry.supports(profile):
        # Constructing an adapter runs nothing.
        result.package_manager = registry.create(profile, CommandRunner()).name

    return result
