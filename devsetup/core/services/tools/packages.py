"""
Package-backed tools — installed through the host package manager.

A ``PackageTool`` lists its packages per profile, optional prerequisite
packages and extra commands before/after the install (repository
setup, ``systemctl enable``, group membership). Only the missing
packages are handed to the package manager.
"""

from __future__ import annotations

import logging
import time

from devsetup.core.context import RunContext
from devsetup.core.engine.reconciler import missing_packages
from devsetup.core.models.action import Receipt
from devsetup.core.models.profile import Profile
from devsetup.core.services.tools.base import Installable, Step

logger = logging.getLogger(__name__)


class PackageTool(Installable):
    """A tool made of one or more system packages.

    Args:
        key: Stable identifier.
        label: Name shown in menus and reports.
        packages: Packages per profile.
        executable: If this resolves on PATH the tool counts as present
            even when the package database disagrees.
        prerequisites: Packages needed before ``pre_steps`` run.
        post_steps: Commands per profile after the packages are in.
    """

    def __init__(
        self,
        key: str,
        label: str,
        packages: dict[Profile, list[str]],
        executable: str | None = None,
        prerequisites: dict[Profile, list[str]] | None = None,
        post_steps: dict[Profile, list[Step]] | None = None,
    ):
        super().__init__(key, label)
        self.packages = packages
        self.executable = executable
        self.prerequisites = prerequisites or {}
        self._post_steps = post_steps or {}

    def packages_for(self, profile: Profile) -> list[str]:
        return list(self.packages.get(profile, []))

    def is_present(self, ctx: RunContext) -> bool:
        if self.executable and ctx.runner.which(self.executable):
            return True
        wanted = self.packages_for(ctx.profile)
        return bool(wanted) and not missing_packages(ctx, wanted)

    def pre_steps(self, ctx: RunContext) -> list[Step]:
        """Commands between prerequisites and the main install."""
        return []

    def post_steps(self, ctx: RunContext) -> list[Step]:
        """Commands after the packages are in."""
        return list(self._post_steps.get(ctx.profile, []))

    def refresh_after_pre_steps(self, ctx: RunContext) -> bool:
        """Whether ``pre_steps`` added a repository that needs an index refresh."""
        return False

    def install(self, ctx: RunContext) -> Receipt:
        started = time.monotonic()

        prereqs = missing_packages(ctx, self.prerequisites.get(ctx.profile, []))
        if prereqs:
            ctx.reporter.info(f"Installing prerequisites: {' '.join(prereqs)}")
            result = ctx.packages.install_many(prereqs)
            if not result.ok:
                return self._failure(started, result.error)
            self._mark_installed(ctx, prereqs)

        failed = self.run_steps(ctx, self.pre_steps(ctx))
        if failed is not None:
            return self._failure(started, failed.error)

        if self.refresh_after_pre_steps(ctx):
            result = ctx.packages.update_index()
            if not result.ok:
                return self._failure(started, result.error)

        wanted = self.packages_for(ctx.profile)
        if not wanted:
            return self._failure(started, f"no packages defined for {ctx.profile.value}")

        needed = missing_packages(ctx, wanted)
        if needed:
            ctx.reporter.info(f"Installing: {' '.join(needed)}")
            result = ctx.packages.install_many(needed)
            if not result.ok:
                return self._failure(started, result.error)
            self._mark_installed(ctx, needed)

        failed = self.run_steps(ctx, self.post_steps(ctx))
        if failed is not None:
            return self._failure(started, failed.error)

        return self._installed(started, output=" ".join(needed))

    @staticmethod
    def _mark_installed(ctx: RunContext, names: list[str]) -> None:
        for name in names:
            ctx.mark_present(f"pkg:{name}")


def _service_steps(service: str, start: bool = True) -> list[Step]:
    steps = [
        Step(["systemctl", "enable", service], privileged=True, optional=True,
             description=f"Enabling {service} service"),
    ]
    if start:
        steps.append(
            Step(["systemctl", "start", service], privileged=True, optional=True,
                 description=f"Starting {service} service"),
        )
    return steps


class DockerTool(PackageTool):
    """Docker CE — distro package on Arch, upstream apt repository on Debian."""

    def __init__(self) -> None:
        super().__init__(
            key="docker",
            label="Docker CE",
            packages={
                Profile.ARCH: ["docker", "docker-compose"],
                Profile.DEBIAN: [
                    "docker-ce", "docker-ce-cli", "containerd.io", "docker-compose-plugin",
                ],
            },
            executable="docker",
            prerequisites={
                Profile.DEBIAN: ["ca-certificates", "curl", "gnupg", "lsb-release"],
            },
        )

    def is_present(self, ctx: RunContext) -> bool:
        # Arch trusts the package database, Debian any docker binary
        if ctx.profile is Profile.ARCH:
            return not missing_packages(ctx, ["docker"])
        return ctx.runner.which("docker") is not None

    def _repo_distro(self, ctx: RunContext) -> str:
        return "debian" if ctx.host is not None and ctx.host.id == "debian" else "ubuntu"

    def pre_steps(self, ctx: RunContext) -> list[Step]:
        if ctx.profile is not Profile.DEBIAN:
            return []
        distro = self._repo_distro(ctx)
        repo = f"https://download.docker.com/linux/{distro}"
        keyring = "/etc/apt/keyrings/docker.gpg"
        return [
            Step(
                ["apt-get", "remove", "-y", "docker", "docker-engine", "docker.io",
                 "containerd", "runc"],
                privileged=True, optional=True,
                description="Removing old Docker packages",
            ),
            Step(["install", "-m", "0755", "-d", "/etc/apt/keyrings"], privileged=True),
            Step(
                ["sh", "-c",
                 f"curl -fsSL --max-time {ctx.network_timeout} {repo}/gpg"
                 f" | gpg --dearmor --yes -o {keyring}"],
                privileged=True, network=True,
                description="Adding Docker's GPG key",
            ),
            Step(
                ["sh", "-c",
                 f'echo "deb [arch=$(dpkg --print-architecture) signed-by={keyring}] '
                 f'{repo} $(lsb_release -cs) stable" > /etc/apt/sources.list.d/docker.list'],
                privileged=True,
                description="Setting up the Docker repository",
            ),
        ]

    def refresh_after_pre_steps(self, ctx: RunContext) -> bool:
        return ctx.profile is Profile.DEBIAN

    def post_steps(self, ctx: RunContext) -> list[Step]:
        return [
            *_service_steps("docker"),
            Step(["usermod", "-aG", "docker", ctx.user], privileged=True,
                 description=f"Adding {ctx.user} to the docker group"),
        ]


def nginx_tool() -> PackageTool:
    return PackageTool(
        key="nginx",
        label="Nginx",
        packages={Profile.ARCH: ["nginx"], Profile.DEBIAN: ["nginx"]},
        post_steps={
            Profile.ARCH: _service_steps("nginx", start=False),
            Profile.DEBIAN: _service_steps("nginx", start=False),
        },
    )


def python_tool() -> PackageTool:
    return PackageTool(
        key="python",
        label="Python3 with pip3",
        packages={
            Profile.ARCH: ["python", "python-pip"],
            Profile.DEBIAN: ["python3", "python3-pip", "python3-venv"],
        },
    )


def vim_tool() -> PackageTool:
    return PackageTool(
        key="vim",
        label="Vim",
        packages={Profile.ARCH: ["vim"], Profile.DEBIAN: ["vim"]},
    )
