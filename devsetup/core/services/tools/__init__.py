"""Installable tools: package-backed, remote-script and zsh plugins."""

from devsetup.core.services.tools.base import Installable, Step
from devsetup.core.services.tools.catalog import app_catalog, plugin_tools, zsh_packages
from devsetup.core.services.tools.packages import DockerTool, PackageTool
from devsetup.core.services.tools.remote import GvmTool, NvmTool, RemoteScriptTool
from devsetup.core.services.tools.zsh import OhMyZsh, ZshPlugin

__all__ = [
    "DockerTool",
    "GvmTool",
    "Installable",
    "NvmTool",
    "OhMyZsh",
    "PackageTool",
    "RemoteScriptTool",
    "Step",
    "ZshPlugin",
    "app_catalog",
    "plugin_tools",
    "zsh_packages",
]
