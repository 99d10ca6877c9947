"""
Settings model — the optional user configuration file.

Every field has a default, so an absent config file yields a working
run. Paths are stored as written (``~`` allowed) and expanded lazily,
so environment overrides are honoured at the moment they are read.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field

DEFAULT_PLUGINS: list[str] = [
    "git",
    "zsh-autosuggestions",
    "zsh-syntax-highlighting",
    "fast-syntax-highlighting",
    "zsh-autocomplete",
]

DEFAULT_EXTRA_SETTINGS: list[str] = [
    "ZSH_AUTOSUGGEST_STRATEGY=(history completion)",
    "HISTSIZE=10000",
    "SAVEHIST=10000",
    "setopt HIST_IGNORE_ALL_DUPS",
]

OHMYZSH_INSTALLER = "https://raw.githubusercontent.com/ohmyzsh/ohmyzsh/master/tools/install.sh"


class ZshSettings(BaseModel):
    """Where the framework lives and how ``.zshrc`` should look."""

    framework_dir: str = "~/.oh-my-zsh"
    custom_dir: str | None = None
    zshrc: str = "~/.zshrc"
    plugins: list[str] = Field(default_factory=lambda: list(DEFAULT_PLUGINS))
    extra_settings: list[str] = Field(default_factory=lambda: list(DEFAULT_EXTRA_SETTINGS))
    installer_url: str = OHMYZSH_INSTALLER

    def framework_path(self) -> Path:
        """Oh My Zsh directory; ``$ZSH`` wins over the configured value."""
        return Path(os.environ.get("ZSH") or self.framework_dir).expanduser()

    def plugin_root(self) -> Path:
        """Directory custom plugins are cloned into.

        ``$ZSH_CUSTOM`` > ``custom_dir`` > ``<framework>/custom``.
        """
        custom = os.environ.get("ZSH_CUSTOM") or self.custom_dir
        base = Path(custom).expanduser() if custom else self.framework_path() / "custom"
        return base / "plugins"

    def zshrc_path(self) -> Path:
        return Path(self.zshrc).expanduser()


class AppsSettings(BaseModel):
    """Pinned versions for the remote-installed toolchains."""

    nvm_version: str = "v0.39.0"
    go_version: str = "go1.21.5"
    gvm_installer_url: str = (
        "https://raw.githubusercontent.com/moovweb/gvm/master/binscripts/gvm-installer"
    )

    @property
    def nvm_installer_url(self) -> str:
        return f"https://raw.githubusercontent.com/nvm-sh/nvm/{self.nvm_version}/install.sh"


class Settings(BaseModel):
    """Root settings — loaded from config.yml or defaulted."""

    version: int = 1

    network_timeout: int = Field(default=60, gt=0)
    package_timeout: int = Field(default=900, gt=0)
    os_release: str = "/etc/os-release"

    zsh: ZshSettings = Field(default_factory=ZshSettings)
    apps: AppsSettings = Field(default_factory=AppsSettings)
