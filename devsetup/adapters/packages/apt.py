"""
apt adapter — Debian, Ubuntu and their derivatives.
"""

from __future__ import annotations

from devsetup.adapters.base import PackageManager
from devsetup.core.models.action import CommandResult

# sudo drops the caller env, so the frontend goes on the command line
_APT_GET = ["env", "DEBIAN_FRONTEND=noninteractive", "apt-get"]


class AptPackageManager(PackageManager):
    """``dpkg-query`` for lookups, ``apt-get`` for changes."""

    @property
    def name(self) -> str:
        return "apt"

    def query_installed(self, package: str) -> bool:
        result = self.runner.run(
            ["dpkg-query", "-W", "-f=${Status}", package],
            timeout=10,
        )
        return result.ok and "install ok installed" in result.stdout

    def update_index(self) -> CommandResult:
        return self.runner.run(
            [*_APT_GET, "update"],
            privileged=True,
            timeout=self.timeout,
        )

    def install_many(self, packages: list[str]) -> CommandResult:
        return self.runner.run(
            [*_APT_GET, "install", "-y", *packages],
            privileged=True,
            timeout=self.timeout,
        )
