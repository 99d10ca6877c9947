"""
Command runner — the single place external processes are started.

Package managers, installers, ``git clone``, ``chsh``: everything a
provisioning run shells out to goes through ``CommandRunner.run``.
The runner never raises for a failed or stalled command; the outcome
is captured in a ``CommandResult``.

Privileged commands get a ``sudo`` prefix unless we already are root.
``sudo`` asks for its password on the controlling terminal, so stdin
stays untouched.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time

from devsetup.core.models.action import CommandResult

logger = logging.getLogger(__name__)

_OUTPUT_TAIL = 2000


class CommandRunner:
    """Run external commands with a bounded timeout.

    Args:
        default_timeout: Seconds before a command is abandoned when the
            caller does not pass ``timeout``.
    """

    name = "shell"

    def __init__(self, default_timeout: int = 120):
        self.default_timeout = default_timeout

    def which(self, executable: str) -> str | None:
        """Resolve an executable on PATH."""
        return shutil.which(executable)

    def is_root(self) -> bool:
        return os.geteuid() == 0

    def run(
        self,
        cmd: list[str],
        *,
        timeout: int | None = None,
        privileged: bool = False,
        env_overrides: dict[str, str] | None = None,
        cwd: str | None = None,
    ) -> CommandResult:
        """Run ``cmd`` and capture its outcome.

        Args:
            cmd: Command list for ``subprocess.run()``.
            timeout: Seconds before ``TimeoutExpired``.
            privileged: Whether the command needs root.
            env_overrides: Extra env vars for the child.
            cwd: Working directory for the command.

        Returns:
            CommandResult; ``ok`` is True only for exit code 0.
        """
        timeout = timeout or self.default_timeout
        if privileged and not self.is_root():
            cmd = ["sudo"] + cmd

        env = os.environ.copy()
        if env_overrides:
            env.update(env_overrides)

        logger.debug("Executing: %s (timeout=%ss)", " ".join(cmd), timeout)
        start = time.monotonic()
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=timeout,
                env=env,
                cwd=cwd,
            )
        except subprocess.TimeoutExpired:
            logger.warning("Command timed out after %ss: %s", timeout, cmd)
            return CommandResult(
                command=cmd,
                timed_out=True,
                error=f"Command timed out ({timeout}s)",
                duration_ms=int((time.monotonic() - start) * 1000),
            )
        except FileNotFoundError:
            return CommandResult.failure(
                cmd, f"Command not found: {cmd[0]}", returncode=127,
            )
        except OSError as e:
            logger.exception("Subprocess error: %s", cmd)
            return CommandResult.failure(cmd, str(e), returncode=None)

        elapsed_ms = int((time.monotonic() - start) * 1000)
        stdout = result.stdout[-_OUTPUT_TAIL:] if result.stdout else ""
        stderr = result.stderr[-_OUTPUT_TAIL:] if result.stderr else ""

        if result.returncode == 0:
            return CommandResult.success(
                cmd, stdout=stdout, stderr=stderr, duration_ms=elapsed_ms,
            )

        last_line = stderr.strip().splitlines()[-1] if stderr.strip() else ""
        error = f"Command failed (exit {result.returncode})"
        if last_line:
            error = f"{error}: {last_line}"
        return CommandResult.failure(
            cmd,
            error,
            returncode=result.returncode,
            stdout=stdout,
            stderr=stderr,
            duration_ms=elapsed_ms,
        )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
