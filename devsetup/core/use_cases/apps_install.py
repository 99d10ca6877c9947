"""
Apps install use case — menu-driven developer tool installation.

    probe → menu selection → reconcile → index update (fatal, only when
    something is missing) → install each missing tool (best-effort)
    → summary + follow-up notes
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from devsetup.adapters.registry import PackageManagerRegistry
from devsetup.adapters.shell.command import CommandRunner
from devsetup.core.engine.executor import ExecutionReport, StepRunner, generate_run_id
from devsetup.core.engine.reconciler import ReconcilePlan, reconcile
from devsetup.core.errors import DevSetupError, FatalStepError
from devsetup.core.models.profile import Profile
from devsetup.core.models.settings import Settings
from devsetup.core.observability.reporter import Reporter
from devsetup.core.services.tools.base import Installable
from devsetup.core.services.tools.catalog import app_catalog
from devsetup.core.use_cases.bootstrap import start_run

logger = logging.getLogger(__name__)

# Receives the menu, returns the chosen tools or None to quit.
Chooser = Callable[[list[Installable]], list[Installable] | None]


@dataclass
class AppsResult:
    """Result of the apps workflow."""

    report: ExecutionReport = field(default_factory=ExecutionReport)
    profile: Profile | None = None
    selected: list[str] = field(default_factory=list)
    cancelled: bool = False
    dry_run: bool = False
    error: str | None = None

    @property
    def exit_code(self) -> int:
        return 1 if self.error else 0

    def to_dict(self) -> dict:
        result: dict = {
            "profile": self.profile.value if self.profile else None,
            "selected": self.selected,
            "cancelled": self.cancelled,
            "dry_run": self.dry_run,
            "report": self.report.to_dict(),
        }
        if self.error:
            result["error"] = self.error
        return result


def run_apps_install(
    settings: Settings,
    *,
    reporter: Reporter,
    choose: Chooser,
    runner: CommandRunner | None = None,
    registry: PackageManagerRegistry | None = None,
    dry_run: bool = False,
) -> AppsResult:
    """Show the tool menu and install what the user picks.

    Args:
        settings: Effective settings.
        reporter: Console reporter.
        choose: Menu callback; ``None`` means the user quit.
        runner: Command runner (tests pass a mock).
        registry: Package manager registry (tests pass a mock one).
        dry_run: Reconcile and report only.

    Returns:
        AppsResult; ``error`` is set when a fatal step stopped the run.
    """
    result = AppsResult(dry_run=dry_run)
    result.report = ExecutionReport(run_id=generate_run_id(), automation="apps")

    reporter.header("Developer tools installer")
    try:
        ctx = start_run(settings, reporter, runner=runner, registry=registry, dry_run=dry_run)
        result.profile = ctx.profile

        selection = choose(app_catalog())
        if selection is None:
            result.cancelled = True
            reporter.info("Exiting...")
            return result
        result.selected = [tool.key for tool in selection]

        plan = reconcile(ctx, selection)
        if dry_run:
            _report_plan(ctx.reporter, plan)
            return result

        steps = StepRunner(ctx, result.report)
        if not plan.is_empty:
            reporter.info("Updating package index...")
            steps.run_fatal("Package index update", ctx.packages.update_index)
        steps.run_tools(plan)
    except DevSetupError as e:
        result.error = str(e)
        if not isinstance(e, FatalStepError):
            reporter.error(str(e))
        logger.error("apps install aborted: %s", e)

    reporter.summary(result.report)
    if result.error is None:
        _follow_up_notes(reporter, result.report)
    return result


def _report_plan(reporter: Reporter, plan: ReconcilePlan) -> None:
    reporter.header("Dry run: nothing will be changed")
    for tool in plan.present:
        reporter.warning(f"{tool.label} is already installed")
    for tool in plan.missing:
        reporter.info(f"Would install {tool.label}")
    if plan.is_empty:
        reporter.success("Nothing to install")


def _follow_up_notes(reporter: Reporter, report: ExecutionReport) -> None:
    installed = {
        r.metadata.get("key") for r in report.receipts if r.status == "installed"
    }
    if not installed:
        return
    reporter.success("Installation complete!")
    if "docker" in installed:
        reporter.note(
            "Log out and back in for docker group membership to take effect.",
            fg="yellow",
        )
    if installed & {"nvm", "gvm"}:
        reporter.note(
            "Restart your terminal or run: source ~/.bashrc (or ~/.zshrc)",
            fg="yellow",
        )
