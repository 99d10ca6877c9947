"""
Remote-installed toolchains — version managers fetched over HTTPS.

NVM and GVM are not distro packages. Each one is:

    build dependencies (package manager) → upstream installer script
    → a follow-up shell that sources the manager and installs a runtime

All network calls run under the run's network timeout.
"""

from __future__ import annotations

import logging
import shlex
import time
from abc import abstractmethod
from pathlib import Path

from devsetup.adapters.shell.download import run_remote_script
from devsetup.core.context import RunContext
from devsetup.core.engine.reconciler import missing_packages
from devsetup.core.models.action import Receipt
from devsetup.core.models.profile import Profile
from devsetup.core.services.tools.base import Installable

logger = logging.getLogger(__name__)


class RemoteScriptTool(Installable):
    """Base for tools installed by an upstream shell script.

    Subclasses provide the installer URL, the directory the installer
    creates under ``$HOME``, and the follow-up script.
    """

    home_dir: str = ""
    executable: str = ""
    dependencies: dict[Profile, list[str]] = {}

    def install_dir(self, ctx: RunContext) -> Path:
        return ctx.home / self.home_dir

    def is_present(self, ctx: RunContext) -> bool:
        if self.install_dir(ctx).is_dir():
            return True
        return bool(self.executable) and ctx.runner.which(self.executable) is not None

    @abstractmethod
    def installer_url(self, ctx: RunContext) -> str:
        """URL of the upstream install script."""

    @abstractmethod
    def entry_script(self, ctx: RunContext) -> Path:
        """File the follow-up shell sources; must exist after the installer."""

    @abstractmethod
    def follow_up(self, ctx: RunContext) -> str:
        """Shell snippet run after sourcing ``entry_script``."""

    def install(self, ctx: RunContext) -> Receipt:
        started = time.monotonic()

        deps = missing_packages(ctx, self.dependencies.get(ctx.profile, []))
        if deps:
            ctx.reporter.info(f"Installing dependencies: {' '.join(deps)}")
            result = ctx.packages.install_many(deps)
            if not result.ok:
                return self._failure(started, result.error)
            for name in deps:
                ctx.mark_present(f"pkg:{name}")

        url = self.installer_url(ctx)
        ctx.reporter.info(f"Running {self.label} installer from {url}")
        result = run_remote_script(
            ctx.runner, url, interpreter="bash", timeout=ctx.network_timeout,
        )
        if not result.ok:
            return self._failure(started, result.error)

        entry = self.entry_script(ctx)
        if not entry.is_file():
            return self._failure(started, f"installer did not create {entry}")

        script = f". {shlex.quote(str(entry))} && {self.follow_up(ctx)}"
        result = ctx.runner.run(["bash", "-c", script], timeout=ctx.network_timeout)
        if not result.ok:
            return self._failure(started, result.error)

        return self._installed(started, output=result.stdout)


class NvmTool(RemoteScriptTool):
    """NVM plus the current LTS Node.js as default."""

    home_dir = ".nvm"
    executable = "nvm"

    def __init__(self) -> None:
        super().__init__("nvm", "NVM (with LTS Node.js)")

    def installer_url(self, ctx: RunContext) -> str:
        return ctx.settings.apps.nvm_installer_url

    def entry_script(self, ctx: RunContext) -> Path:
        return self.install_dir(ctx) / "nvm.sh"

    def follow_up(self, ctx: RunContext) -> str:
        return "nvm install --lts && nvm use --lts && nvm alias default 'lts/*'"


class GvmTool(RemoteScriptTool):
    """GVM plus a pinned Go release as default."""

    home_dir = ".gvm"
    executable = "gvm"
    dependencies = {
        Profile.ARCH: ["git", "mercurial", "make", "binutils", "bison", "gcc"],
        Profile.DEBIAN: [
            "curl", "git", "mercurial", "make", "binutils", "bison", "gcc", "build-essential",
        ],
    }

    def __init__(self) -> None:
        super().__init__("gvm", "GVM (with latest Go version)")

    def installer_url(self, ctx: RunContext) -> str:
        return ctx.settings.apps.gvm_installer_url

    def entry_script(self, ctx: RunContext) -> Path:
        return self.install_dir(ctx) / "scripts" / "gvm"

    def follow_up(self, ctx: RunContext) -> str:
        go = shlex.quote(ctx.settings.apps.go_version)
        # -B: binary release, no bootstrap compiler needed
        return f"gvm install {go} -B && gvm use {go} --default"
