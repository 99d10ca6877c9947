"""
Step runner — executes a reconciled plan, best-effort.

Policy:
    - Fatal steps (package index update, framework install) go through
      ``run_fatal``; a failure raises ``FatalStepError`` and the run ends.
    - Tools go through ``run_tools``; one tool failing (bad exit,
      timeout, unexpected exception) is reported and recorded, and the
      next tool still runs.
    - Tools already present are recorded as such and never reinstalled.

Flow:
    plan → for each desired tool: present? record : install → receipt
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Callable

from devsetup.core.errors import FatalStepError
from devsetup.core.models.action import CommandResult, Receipt

if TYPE_CHECKING:
    from devsetup.core.context import RunContext
    from devsetup.core.engine.reconciler import ReconcilePlan

logger = logging.getLogger(__name__)


@dataclass
class ExecutionReport:
    """Per-tool outcomes of one run."""

    run_id: str = ""
    automation: str = ""
    receipts: list[Receipt] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.receipts)

    @property
    def installed(self) -> int:
        return sum(1 for r in self.receipts if r.status == "installed")

    @property
    def present(self) -> int:
        return sum(1 for r in self.receipts if r.status == "present")

    @property
    def failed(self) -> int:
        return sum(1 for r in self.receipts if r.failed)

    @property
    def all_ok(self) -> bool:
        return self.failed == 0

    @property
    def status(self) -> str:
        if self.failed == 0:
            return "ok"
        if self.installed + self.present > 0:
            return "partial"
        return "failed"

    def add(self, receipt: Receipt) -> None:
        self.receipts.append(receipt)

    def failed_tools(self) -> list[str]:
        return [r.tool for r in self.receipts if r.failed]

    def to_dict(self) -> dict:
        return {
            "run_id": self.run_id,
            "automation": self.automation,
            "status": self.status,
            "total": self.total,
            "installed": self.installed,
            "present": self.present,
            "failed": self.failed,
            "receipts": [r.model_dump(mode="json") for r in self.receipts],
        }


class StepRunner:
    """Runs fatal steps and tool installs for one run context."""

    def __init__(self, ctx: RunContext, report: ExecutionReport | None = None):
        self.ctx = ctx
        self.report = report or ExecutionReport(run_id=generate_run_id())

    def run_fatal(
        self,
        name: str,
        fn: Callable[[], CommandResult | Receipt],
    ) -> CommandResult | Receipt:
        """Run a load-bearing step and return its outcome.

        A failed Receipt is still recorded in the report before raising.

        Raises:
            FatalStepError: If the step does not succeed.
        """
        logger.info("Fatal step: %s", name)
        outcome = fn()
        if not outcome.ok:
            reason = outcome.error or "unknown error"
            if isinstance(outcome, Receipt):
                self.report.add(outcome)
            self.ctx.reporter.error(f"{name} failed: {reason}")
            raise FatalStepError(name, reason)
        logger.debug("Fatal step ok: %s", name)
        return outcome

    def run_tools(self, plan: ReconcilePlan) -> ExecutionReport:
        """Install every missing tool in ``plan``; never raises."""
        for tool in plan.desired:
            if not plan.is_missing(tool):
                self.ctx.reporter.warning(f"{tool.label} is already installed")
                self.report.add(Receipt.present(tool.label, metadata={"key": tool.key}))
                continue

            self.ctx.reporter.info(f"Installing {tool.label}...")
            try:
                receipt = tool.install(self.ctx)
            except Exception as e:
                logger.exception("Unexpected error installing %s", tool.key)
                receipt = Receipt.failure(tool.label, f"unexpected error: {e}")

            if receipt.ok:
                self.ctx.mark_present(tool.presence_key)
                self.ctx.reporter.success(f"{tool.label} installed successfully")
            else:
                self.ctx.reporter.error(f"Failed to install {tool.label}: {receipt.error}")
            self.report.add(receipt)

            status_marker = "✓" if receipt.ok else "✗"
            logger.info("%s %s → %s", status_marker, tool.key, receipt.status)

        return self.report


def generate_run_id() -> str:
    """Generate a unique run ID."""
    now = datetime.now(UTC).strftime("%Y%m%d-%H%M%S")
    short = uuid.uuid4().hex[:6]
    return f"run-{now}-{short}"
