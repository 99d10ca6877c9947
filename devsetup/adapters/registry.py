"""
Package manager registry — which adapter serves which host profile.

The registry is the single point where a Profile turns into a concrete
package manager. Nothing else in the code knows that Debian means apt.
"""

from __future__ import annotations

import logging
from typing import Callable

from devsetup.adapters.base import PackageManager
from devsetup.adapters.packages.apt import AptPackageManager
from devsetup.adapters.packages.pacman import PacmanPackageManager
from devsetup.adapters.shell.command import CommandRunner
from devsetup.core.models.profile import Profile

logger = logging.getLogger(__name__)

PackageManagerFactory = Callable[[CommandRunner, int], PackageManager]


class PackageManagerRegistry:
    """Maps profiles to package manager factories.

    Features:
        - Register factories by profile
        - Mock mode: every profile gets the same pre-built manager
        - Query whether a profile is supported
    """

    def __init__(self, mock_manager: PackageManager | None = None):
        self._factories: dict[Profile, PackageManagerFactory] = {}
        self._mock_manager = mock_manager

    @property
    def mock_mode(self) -> bool:
        return self._mock_manager is not None

    def register(self, profile: Profile, factory: PackageManagerFactory) -> None:
        if profile is Profile.UNKNOWN:
            raise ValueError("Cannot register a package manager for the unknown profile")
        if profile in self._factories:
            logger.warning("Overwriting package manager for profile: %s", profile.value)
        self._factories[profile] = factory
        logger.debug("Registered package manager for %s", profile.value)

    def supports(self, profile: Profile) -> bool:
        return self.mock_mode or profile in self._factories

    def create(
        self,
        profile: Profile,
        runner: CommandRunner,
        timeout: int = 900,
    ) -> PackageManager:
        """Build the package manager for ``profile``.

        Raises:
            KeyError: If no manager is registered for the profile.
        """
        if self._mock_manager is not None:
            return self._mock_manager
        factory = self._factories.get(profile)
        if factory is None:
            raise KeyError(f"No package manager registered for profile: {profile.value}")
        return factory(runner, timeout)


def default_registry() -> PackageManagerRegistry:
    """Registry with the two supported distribution families."""
    registry = PackageManagerRegistry()
    registry.register(Profile.ARCH, PacmanPackageManager)
    registry.register(Profile.DEBIAN, AptPackageManager)
    return registry
