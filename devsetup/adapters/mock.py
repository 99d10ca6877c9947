"""
Mock adapters — test doubles for the command runner and package manager.

Nothing here touches the host. By default every command succeeds;
failures and timeouts are configured per command fragment.
"""

from __future__ import annotations

from devsetup.adapters.base import PackageManager
from devsetup.adapters.shell.command import CommandRunner
from devsetup.core.models.action import CommandResult


class MockCommandRunner(CommandRunner):
    """Records every command and answers from configuration.

    A command matches a configured fragment when the fragment occurs
    anywhere in ``" ".join(cmd)``.
    """

    name = "mock"

    def __init__(
        self,
        executables: set[str] | None = None,
        root: bool = False,
        default_output: str = "[mock] executed",
    ):
        super().__init__(default_timeout=120)
        self._executables = set(executables or ())
        self._root = root
        self._default_output = default_output
        self._failures: dict[str, str] = {}
        self._timeouts: set[str] = set()
        self._call_log: list[list[str]] = []
        self._timeouts_seen: list[int | None] = []

    @property
    def call_log(self) -> list[list[str]]:
        """All commands this mock has received, in order."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    @property
    def timeouts_seen(self) -> list[int | None]:
        return self._timeouts_seen

    def add_executable(self, name: str) -> None:
        self._executables.add(name)

    def which(self, executable: str) -> str | None:
        if executable in self._executables:
            return f"/usr/bin/{executable}"
        return None

    def is_root(self) -> bool:
        return self._root

    def set_failure(self, fragment: str, error: str = "Mock failure") -> None:
        """Configure commands containing ``fragment`` to fail."""
        self._failures[fragment] = error

    def set_timeout(self, fragment: str) -> None:
        """Configure commands containing ``fragment`` to time out."""
        self._timeouts.add(fragment)

    def ran(self, fragment: str) -> bool:
        """Whether any recorded command contains ``fragment``."""
        return any(fragment in " ".join(cmd) for cmd in self._call_log)

    def run(
        self,
        cmd: list[str],
        *,
        timeout: int | None = None,
        privileged: bool = False,
        env_overrides: dict[str, str] | None = None,
        cwd: str | None = None,
    ) -> CommandResult:
        if privileged and not self._root:
            cmd = ["sudo"] + cmd
        self._call_log.append(cmd)
        self._timeouts_seen.append(timeout)

        joined = " ".join(cmd)
        for fragment in self._timeouts:
            if fragment in joined:
                return CommandResult(
                    command=cmd,
                    timed_out=True,
                    error=f"Command timed out ({timeout}s)",
                )
        for fragment, error in self._failures.items():
            if fragment in joined:
                return CommandResult.failure(cmd, error)

        return CommandResult.success(cmd, stdout=self._default_output)

    def reset(self) -> None:
        """Clear call log and configured responses."""
        self._call_log.clear()
        self._timeouts_seen.clear()
        self._failures.clear()
        self._timeouts.clear()


class MockPackageManager(PackageManager):
    """In-memory package database.

    ``install_many`` marks packages installed unless one of them is in
    ``failing``; ``update_index`` fails when ``fail_update`` is set.
    """

    def __init__(
        self,
        runner: CommandRunner | None = None,
        installed: set[str] | None = None,
        fail_update: bool = False,
        failing: set[str] | None = None,
    ):
        super().__init__(runner or MockCommandRunner(), timeout=900)
        self.installed = set(installed or ())
        self.fail_update = fail_update
        self.failing = set(failing or ())
        self.queries: list[str] = []
        self.updates = 0
        self.install_calls: list[list[str]] = []

    @property
    def name(self) -> str:
        return "mock"

    def query_installed(self, package: str) -> bool:
        self.queries.append(package)
        return package in self.installed

    def update_index(self) -> CommandResult:
        self.updates += 1
        cmd = ["mock-pm", "update"]
        if self.fail_update:
            return CommandResult.failure(cmd, "Mock index update failure")
        return CommandResult.success(cmd)

    def install_many(self, packages: list[str]) -> CommandResult:
        self.install_calls.append(list(packages))
        cmd = ["mock-pm", "install", *packages]
        bad = [p for p in packages if p in self.failing]
        if bad:
            return CommandResult.failure(cmd, f"Mock install failure: {', '.join(bad)}")
        self.installed.update(packages)
        return CommandResult.success(cmd)
