"""
Installable — the uniform contract every tool implements.

The step runner only ever calls ``is_present(ctx)`` and
``install(ctx)``. How a tool gets installed (package manager, remote
script, ``git clone``) is the tool's business. Adding a tool means
adding an instance or subclass, never a branch in the runner.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass

from devsetup.core.context import RunContext
from devsetup.core.models.action import CommandResult, Receipt

logger = logging.getLogger(__name__)


@dataclass
class Step:
    """One external command inside a tool's install procedure.

    ``network`` steps get the short network timeout, everything else
    the package timeout. A failing ``optional`` step is logged and
    skipped instead of failing the tool.
    """

    cmd: list[str]
    description: str = ""
    privileged: bool = False
    network: bool = False
    optional: bool = False


class Installable(ABC):
    """A tool the user can ask for."""

    def __init__(self, key: str, label: str):
        self.key = key
        self.label = label

    @property
    def presence_key(self) -> str:
        return f"tool:{self.key}"

    @abstractmethod
    def is_present(self, ctx: RunContext) -> bool:
        """Read-only check: is this tool already on the host?"""

    @abstractmethod
    def install(self, ctx: RunContext) -> Receipt:
        """Install the tool. Failures come back as a failed Receipt."""

    def run_steps(self, ctx: RunContext, steps: list[Step]) -> CommandResult | None:
        """Run ``steps`` in order; return the first required failure."""
        for step in steps:
            timeout = ctx.network_timeout if step.network else ctx.package_timeout
            if step.description:
                ctx.reporter.info(step.description)
            result = ctx.runner.run(step.cmd, privileged=step.privileged, timeout=timeout)
            if result.ok:
                continue
            if step.optional:
                logger.info("Optional step failed for %s: %s", self.key, result.error)
                ctx.reporter.warning(f"{step.description or ' '.join(step.cmd)}: {result.error}")
                continue
            return result
        return None

    def _failure(self, started: float, error: str | None) -> Receipt:
        return Receipt.failure(
            self.label,
            error or "unknown error",
            duration_ms=_elapsed_ms(started),
            metadata={"key": self.key},
        )

    def _installed(self, started: float, output: str = "") -> Receipt:
        return Receipt.installed(
            self.label,
            output=output,
            duration_ms=_elapsed_ms(started),
            metadata={"key": self.key},
        )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} key={self.key!r}>"


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)
