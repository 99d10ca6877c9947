"""
zsh tools — the Oh My Zsh framework and its custom plugins.

The framework is a load-bearing step: the plugin clones and the
``.zshrc`` edit both depend on it. Plugins are independent of each
other; any one of them may fail without stopping the rest.
"""

from __future__ import annotations

import time
from pathlib import Path

from devsetup.adapters.shell.download import run_remote_script
from devsetup.core.context import RunContext
from devsetup.core.models.action import Receipt
from devsetup.core.services.tools.base import Installable


class OhMyZsh(Installable):
    """The Oh My Zsh framework, installed unattended."""

    def __init__(self) -> None:
        super().__init__("oh-my-zsh", "Oh My ZSH")

    def is_present(self, ctx: RunContext) -> bool:
        return ctx.settings.zsh.framework_path().is_dir()

    def install(self, ctx: RunContext) -> Receipt:
        started = time.monotonic()
        zsh = ctx.settings.zsh
        # The installer must neither start zsh nor change the login
        # shell itself; the shell changer owns that.
        result = run_remote_script(
            ctx.runner,
            zsh.installer_url,
            interpreter="sh",
            args=["--unattended"],
            timeout=ctx.network_timeout,
            env_overrides={
                "ZSH": str(zsh.framework_path()),
                "RUNZSH": "no",
                "CHSH": "no",
            },
        )
        if not result.ok:
            return self._failure(started, result.error)
        return self._installed(started)


class ZshPlugin(Installable):
    """A custom plugin cloned into ``$ZSH_CUSTOM/plugins/<name>``."""

    def __init__(self, name: str, url: str, shallow: bool = False):
        super().__init__(name, name)
        self.url = url
        self.shallow = shallow

    def target(self, ctx: RunContext) -> Path:
        return ctx.settings.zsh.plugin_root() / self.key

    def is_present(self, ctx: RunContext) -> bool:
        return self.target(ctx).is_dir()

    def install(self, ctx: RunContext) -> Receipt:
        started = time.monotonic()
        cmd = ["git", "clone"]
        if self.shallow:
            cmd += ["--depth", "1"]
        cmd += [self.url, str(self.target(ctx))]

        result = ctx.runner.run(cmd, timeout=ctx.network_timeout)
        if not result.ok:
            return self._failure(started, result.error)
        return self._installed(started)
