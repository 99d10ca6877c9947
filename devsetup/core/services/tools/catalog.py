"""
Tool catalog — the fixed menus of both workflows.

The apps menu order is the order users see and the order tools are
installed in. The zsh plugin list comes from settings; names without a
known clone source (``git``) ship with the framework and are skipped.
"""

from __future__ import annotations

import logging

from devsetup.core.models.profile import Profile
from devsetup.core.models.settings import Settings
from devsetup.core.services.tools.base import Installable
from devsetup.core.services.tools.packages import (
    DockerTool,
    nginx_tool,
    python_tool,
    vim_tool,
)
from devsetup.core.services.tools.remote import GvmTool, NvmTool
from devsetup.core.services.tools.zsh import ZshPlugin

logger = logging.getLogger(__name__)


# ── zsh workflow ────────────────────────────────────────────────

ZSH_PACKAGES: dict[Profile, list[str]] = {
    Profile.ARCH: ["zsh", "git", "curl"],
    Profile.DEBIAN: [
        "zsh", "zsh-autosuggestions", "zsh-syntax-highlighting", "git", "curl",
    ],
}

# name → (clone url, shallow)
PLUGIN_SOURCES: dict[str, tuple[str, bool]] = {
    "zsh-autosuggestions": (
        "https://github.com/zsh-users/zsh-autosuggestions", False,
    ),
    "zsh-syntax-highlighting": (
        "https://github.com/zsh-users/zsh-syntax-highlighting.git", False,
    ),
    "fast-syntax-highlighting": (
        "https://github.com/zdharma-continuum/fast-syntax-highlighting.git", False,
    ),
    "zsh-autocomplete": (
        "https://github.com/marlonrichert/zsh-autocomplete.git", True,
    ),
}

# Plugins bundled with Oh My Zsh itself.
BUILTIN_PLUGINS = frozenset({"git"})


def zsh_packages(profile: Profile) -> list[str]:
    return list(ZSH_PACKAGES.get(profile, []))


def plugin_tools(settings: Settings) -> list[Installable]:
    """Clonable plugins from ``settings.zsh.plugins``, in declaration order."""
    tools: list[Installable] = []
    for name in settings.zsh.plugins:
        if name in BUILTIN_PLUGINS:
            continue
        source = PLUGIN_SOURCES.get(name)
        if source is None:
            logger.warning("No clone source for plugin %s, assuming it is bundled", name)
            continue
        url, shallow = source
        tools.append(ZshPlugin(name, url, shallow=shallow))
    return tools


# ── apps workflow ───────────────────────────────────────────────

def app_catalog() -> list[Installable]:
    """The apps menu, in display order."""
    return [
        DockerTool(),
        nginx_tool(),
        NvmTool(),
        GvmTool(),
        python_tool(),
        vim_tool(),
    ]
