"""
Reconciler — desired tools minus what the host already has.

Two entry points:

- ``parse_selection`` turns one line of menu input into an ordered,
  de-duplicated tool list (``"2 1 2"`` and ``"1 2"`` are the same).
- ``reconcile`` splits a desired list into present and missing.

Both are read-only. Anything confirmed present is cached on the run
context and never queried again in the same run.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from devsetup.core.context import RunContext

if TYPE_CHECKING:
    from devsetup.core.services.tools.base import Installable

logger = logging.getLogger(__name__)

_SELECTION_RE = re.compile(r"^\d+(\s+\d+)*$")


@dataclass
class ReconcilePlan:
    """Desired tools, split by current state. Order follows ``desired``."""

    desired: list[Installable] = field(default_factory=list)
    present: list[Installable] = field(default_factory=list)
    missing: list[Installable] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.missing

    def is_missing(self, tool: Installable) -> bool:
        return any(t is tool for t in self.missing)


def all_token(menu: Sequence[Installable]) -> int:
    """The menu number that means "everything"."""
    return len(menu) + 1


def parse_selection(text: str, menu: Sequence[Installable]) -> list[Installable] | None:
    """Validate menu input against the allow-list.

    Accepts space-separated integers in ``1..len(menu)+1``; the last
    number selects every tool. Repeats are allowed and collapse.

    Returns:
        Tools in ascending menu order, or None when the input is invalid.
    """
    text = text.strip()
    if not _SELECTION_RE.match(text):
        return None

    numbers = {int(token) for token in text.split()}
    everything = all_token(menu)
    if any(n < 1 or n > everything for n in numbers):
        return None

    if everything in numbers:
        return list(menu)
    return [menu[n - 1] for n in sorted(numbers)]


def missing_packages(ctx: RunContext, packages: Sequence[str]) -> list[str]:
    """Packages from ``packages`` that are not on the host, in order.

    A package counts as present when the package manager reports it
    installed or an executable of the same name resolves on PATH.
    """
    missing: list[str] = []
    for name in dict.fromkeys(packages):
        key = f"pkg:{name}"
        if ctx.is_confirmed(key):
            continue
        if ctx.packages.query_installed(name) or ctx.runner.which(name):
            ctx.mark_present(key)
            continue
        missing.append(name)
    return missing


def reconcile(ctx: RunContext, tools: Sequence[Installable]) -> ReconcilePlan:
    """Split ``tools`` into present and missing for this host."""
    plan = ReconcilePlan()
    seen: set[str] = set()
    for tool in tools:
        if tool.key in seen:
            continue
        seen.add(tool.key)
        plan.desired.append(tool)

        if ctx.is_confirmed(tool.presence_key) or tool.is_present(ctx):
            ctx.mark_present(tool.presence_key)
            plan.present.append(tool)
        else:
            plan.missing.append(tool)

    logger.info(
        "Reconciled %d tools: %d present, %d missing",
        len(plan.desired), len(plan.present), len(plan.missing),
    )
    return plan
