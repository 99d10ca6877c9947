"""Adapters — bindings to the host's package managers and shell.

Public re-exports for convenient access.
"""

from devsetup.adapters.base import PackageManager
from devsetup.adapters.mock import MockCommandRunner, MockPackageManager
from devsetup.adapters.registry import PackageManagerRegistry, default_registry
from devsetup.adapters.shell.command import CommandRunner

__all__ = [
    "CommandRunner",
    "MockCommandRunner",
    "MockPackageManager",
    "PackageManager",
    "PackageManagerRegistry",
    "default_registry",
]
