"""
Run bootstrap — probe the host and build the RunContext.

Shared first stage of every workflow. An unknown host stops here,
before any menu is shown or any command runs.
"""

from __future__ import annotations

import logging
from pathlib import Path

from devsetup.adapters.registry import PackageManagerRegistry, default_registry
from devsetup.adapters.shell.command import CommandRunner
from devsetup.core.context import RunContext
from devsetup.core.engine.prober import detect_profile
from devsetup.core.errors import UnsupportedHostError
from devsetup.core.models.settings import Settings
from devsetup.core.observability.reporter import Reporter

logger = logging.getLogger(__name__)


def start_run(
    settings: Settings,
    reporter: Reporter,
    *,
    runner: CommandRunner | None = None,
    registry: PackageManagerRegistry | None = None,
    dry_run: bool = False,
) -> RunContext:
    """Probe the host and assemble the context for one run.

    Raises:
        UnsupportedHostError: The host is not arch- or debian-family,
            or no package manager serves its profile.
    """
    os_release = Path(settings.os_release).expanduser()
    profile, host = detect_profile(os_release)

    if host is not None:
        reporter.info(f"Detected distribution: {host.display_name}")
    if not profile.supported:
        what = host.id if host and host.id else f"unreadable {os_release}"
        raise UnsupportedHostError(
            f"Unsupported distribution ({what}). Supported: Arch-based and Debian-based."
        )

    runner = runner or CommandRunner()
    registry = registry or default_registry()
    try:
        packages = registry.create(profile, runner, timeout=settings.package_timeout)
    except KeyError as e:
        raise UnsupportedHostError(str(e)) from e

    reporter.info(f"Using profile {profile.value} ({packages.name})")
    logger.info("Run context: profile=%s packages=%s dry_run=%s", profile.value, packages.name, dry_run)

    return RunContext(
        profile=profile,
        settings=settings,
        runner=runner,
        packages=packages,
        reporter=reporter,
        host=host,
        dry_run=dry_run,
    )
