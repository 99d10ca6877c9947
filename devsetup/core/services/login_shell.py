"""
Login shell changer — best-effort, never fatal.

Tries the sanctioned tools in order and stops at the first success:

    chsh -s PATH  →  sudo chsh -s PATH USER  →  sudo usermod -s PATH USER

The account database is never edited by hand. When every strategy
fails the user gets the exact commands to run themselves.
"""

from __future__ import annotations

import logging
import os
import pwd
from dataclasses import dataclass, field
from pathlib import Path

from devsetup.core.context import RunContext

logger = logging.getLogger(__name__)

SHELLS_FILE = Path("/etc/shells")

# chsh may sit on a PAM password prompt; don't wait the package timeout.
_CHSH_TIMEOUT = 60


@dataclass
class ShellChangeResult:
    """Outcome of one shell change attempt."""

    shell: str
    changed: bool = False
    already_default: bool = False
    strategy: str | None = None
    listed: bool = True
    error: str | None = None
    remediation: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.changed or self.already_default

    def to_dict(self) -> dict:
        return {
            "shell": self.shell,
            "changed": self.changed,
            "already_default": self.already_default,
            "strategy": self.strategy,
            "listed": self.listed,
            "error": self.error,
            "remediation": self.remediation,
        }


def current_login_shell(user: str) -> str:
    """The user's login shell from the account database, else ``$SHELL``."""
    try:
        return pwd.getpwnam(user).pw_shell
    except KeyError:
        return os.environ.get("SHELL", "")


def is_listed(shell_path: str, shells_file: Path = SHELLS_FILE) -> bool:
    """Whether ``shell_path`` appears in ``/etc/shells``."""
    try:
        lines = shells_file.read_text(encoding="utf-8").splitlines()
    except OSError:
        return False
    return any(line.strip() == shell_path for line in lines)


def remediation_commands(shell_path: str, user: str, listed: bool) -> list[str]:
    commands = []
    if not listed:
        commands.append(f"echo {shell_path} | sudo tee -a /etc/shells")
    commands.append(f"chsh -s {shell_path}")
    commands.append(f"sudo usermod -s {shell_path} {user}")
    return commands


def change_login_shell(
    ctx: RunContext,
    shell: str = "zsh",
    shells_file: Path = SHELLS_FILE,
) -> ShellChangeResult:
    """Make ``shell`` the login shell of ``ctx.user``. Never raises."""
    result = ShellChangeResult(shell=shell)

    shell_path = ctx.runner.which(shell)
    if shell_path is None:
        result.error = f"{shell} not found on PATH"
        ctx.reporter.warning(f"Cannot change default shell: {result.error}")
        return result
    result.shell = shell_path

    current = current_login_shell(ctx.user)
    if current and Path(current).name == Path(shell_path).name:
        result.already_default = True
        ctx.reporter.warning(f"{shell} is already the default shell")
        return result

    result.listed = is_listed(shell_path, shells_file)
    if not result.listed:
        ctx.reporter.warning(f"{shell_path} is not listed in {shells_file}")

    strategies: list[tuple[str, list[str], bool]] = [
        ("chsh", ["chsh", "-s", shell_path], False),
        ("sudo chsh", ["chsh", "-s", shell_path, ctx.user], True),
        ("usermod", ["usermod", "-s", shell_path, ctx.user], True),
    ]
    if ctx.runner.is_root():
        # Same commands without sudo; the first one already covers root.
        strategies = strategies[1:]

    ctx.reporter.info(f"Changing default shell to {shell}...")
    errors = []
    for name, cmd, privileged in strategies:
        outcome = ctx.runner.run(cmd, privileged=privileged, timeout=_CHSH_TIMEOUT)
        if outcome.ok:
            result.changed = True
            result.strategy = name
            logger.info("Login shell for %s set to %s via %s", ctx.user, shell_path, name)
            ctx.reporter.success(f"Default shell changed to {shell}")
            return result
        logger.info("Shell change via %s failed: %s", name, outcome.error)
        errors.append(f"{name}: {outcome.error}")

    result.error = "; ".join(errors)
    result.remediation = remediation_commands(shell_path, ctx.user, result.listed)
    ctx.reporter.warning(f"Could not change the default shell ({result.error})")
    ctx.reporter.note("Run one of these yourself to finish:", fg="yellow")
    for command in result.remediation:
        ctx.reporter.note(f"    {command}")
    return result
