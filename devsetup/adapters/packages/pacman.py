"""
pacman adapter — Arch Linux, Manjaro, EndeavourOS.
"""

from __future__ import annotations

from devsetup.adapters.base import PackageManager
from devsetup.core.models.action import CommandResult


class PacmanPackageManager(PackageManager):

    @property
    def name(self) -> str:
        return "pacman"

    def query_installed(self, package: str) -> bool:
        return self.runner.run(["pacman", "-Q", package], timeout=10).ok

    def update_index(self) -> CommandResult:
        return self.runner.run(
            ["pacman", "-Sy", "--noconfirm"],
            privileged=True,
            timeout=self.timeout,
        )

    def install_many(self, packages: list[str]) -> CommandResult:
        # --needed keeps pacman from reinstalling what is already there
        return self.runner.run(
            ["pacman", "-S", "--noconfirm", "--needed", *packages],
            privileged=True,
            timeout=self.timeout,
        )
