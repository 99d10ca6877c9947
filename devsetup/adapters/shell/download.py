"""
Remote installer scripts — download to a tempfile, then execute.

Replaces the ``curl ... | sh`` pattern: the script is fetched with a
hard ``--max-time`` into a private temp file, run from there with the
installer's unattended flags, and removed afterwards.
"""

from __future__ import annotations

import logging
import os
import tempfile

from devsetup.adapters.shell.command import CommandRunner
from devsetup.core.models.action import CommandResult

logger = logging.getLogger(__name__)


def fetch_script(
    runner: CommandRunner,
    url: str,
    *,
    timeout: int,
) -> tuple[CommandResult, str]:
    """Download ``url`` into a fresh temp file.

    Returns:
        ``(result, path)``; on failure the temp file is already gone.
    """
    fd, path = tempfile.mkstemp(suffix=".sh", prefix="devsetup_script_")
    os.close(fd)
    os.chmod(path, 0o700)

    result = runner.run(
        ["curl", "-fsSL", "--max-time", str(timeout), "-o", path, url],
        timeout=timeout + 5,
    )
    if not result.ok:
        cleanup_script(path)
    return result, path


def run_remote_script(
    runner: CommandRunner,
    url: str,
    *,
    interpreter: str = "bash",
    args: list[str] | None = None,
    timeout: int,
    env_overrides: dict[str, str] | None = None,
) -> CommandResult:
    """Fetch and execute a remote installer under one timeout budget.

    Args:
        runner: Command runner to use.
        url: HTTPS URL of the installer.
        interpreter: ``sh`` or ``bash``.
        args: Extra installer arguments (e.g. ``["--unattended"]``).
        timeout: Seconds allowed for the download and, again, for the run.
        env_overrides: Extra env vars for the installer.
    """
    fetched, path = fetch_script(runner, url, timeout=timeout)
    if not fetched.ok:
        logger.warning("Download of %s failed: %s", url, fetched.error)
        return fetched

    try:
        return runner.run(
            [interpreter, path, *(args or [])],
            timeout=timeout,
            env_overrides=env_overrides,
        )
    finally:
        cleanup_script(path)


def cleanup_script(path: str) -> None:
    """Remove a temporary script file."""
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass
