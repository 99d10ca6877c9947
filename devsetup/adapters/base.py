"""
Package manager base — the contract between the engine and apt/pacman.

The reconciler and step runner only talk to a ``PackageManager``,
never to ``apt-get`` or ``pacman`` directly. Supporting a new
distribution family means one new subclass plus one registry entry.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from devsetup.adapters.shell.command import CommandRunner
from devsetup.core.models.action import CommandResult


class PackageManager(ABC):
    """Abstract base class for system package managers.

    Adapters never raise for a failed command; failures come back in the
    ``CommandResult``.

    To add a package manager:
        1. Subclass PackageManager
        2. Implement name, query_installed, update_index, install_many
        3. Register it in the PackageManagerRegistry
    """

    def __init__(self, runner: CommandRunner, timeout: int = 900):
        self.runner = runner
        self.timeout = timeout

    @property
    @abstractmethod
    def name(self) -> str:
        """The package manager identifier (e.g., 'apt', 'pacman')."""

    @abstractmethod
    def query_installed(self, package: str) -> bool:
        """Whether the package database reports ``package`` as installed.

        Read-only. A failed query counts as "not installed".
        """

    @abstractmethod
    def update_index(self) -> CommandResult:
        """Refresh the package index."""

    @abstractmethod
    def install_many(self, packages: list[str]) -> CommandResult:
        """Install all ``packages`` in one non-interactive transaction."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
