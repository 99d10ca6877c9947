"""
Run context — everything one provisioning run knows.

A single ``RunContext`` is built after probing and handed to every
component call: the reconciler, the step runner, each tool's install
procedure, the config editor and the shell changer. There is no
module-level state; two contexts never share anything.
"""

from __future__ import annotations

import getpass
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from devsetup.core.models.profile import HostInfo, Profile
from devsetup.core.models.settings import Settings

if TYPE_CHECKING:
    from devsetup.adapters.base import PackageManager
    from devsetup.adapters.shell.command import CommandRunner
    from devsetup.core.observability.reporter import Reporter


def _current_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return os.environ.get("USER", "root")


@dataclass
class RunContext:
    """Per-run state threaded through every component."""

    profile: Profile
    settings: Settings
    runner: CommandRunner
    packages: PackageManager
    reporter: Reporter
    host: HostInfo | None = None
    dry_run: bool = False
    user: str = field(default_factory=_current_user)
    home: Path = field(default_factory=Path.home)

    # Keys confirmed present this run ("pkg:git", "tool:docker").
    # Never re-queried once set.
    confirmed_present: set[str] = field(default_factory=set)

    @property
    def network_timeout(self) -> int:
        return self.settings.network_timeout

    @property
    def package_timeout(self) -> int:
        return self.settings.package_timeout

    def mark_present(self, key: str) -> None:
        self.confirmed_present.add(key)

    def is_confirmed(self, key: str) -> bool:
        return key in self.confirmed_present
