"""
zsh setup use case — the full zsh workflow.

    probe → zsh packages → Oh My Zsh (fatal) → plugins (best-effort)
    → .zshrc edit (fatal on missing file) → login shell (best-effort)
    → verify → summary

Running it again on a finished host installs nothing, makes no new
backup and leaves ``.zshrc`` byte-identical.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from devsetup.adapters.registry import PackageManagerRegistry
from devsetup.adapters.shell.command import CommandRunner
from devsetup.core.context import RunContext
from devsetup.core.engine.executor import ExecutionReport, StepRunner, generate_run_id
from devsetup.core.engine.reconciler import missing_packages, reconcile
from devsetup.core.errors import DevSetupError, FatalStepError, MissingConfigError
from devsetup.core.models.action import Receipt
from devsetup.core.models.profile import Profile
from devsetup.core.models.settings import Settings
from devsetup.core.observability.reporter import Reporter
from devsetup.core.services.login_shell import (
    SHELLS_FILE,
    ShellChangeResult,
    change_login_shell,
    current_login_shell,
)
from devsetup.core.services.tools.catalog import ZSH_PACKAGES, plugin_tools, zsh_packages
from devsetup.core.services.tools.packages import PackageTool
from devsetup.core.services.tools.zsh import OhMyZsh
from devsetup.core.services.zshrc import EditResult, apply_plugin_config, is_applied, needs_update
from devsetup.core.use_cases.bootstrap import start_run

logger = logging.getLogger(__name__)


@dataclass
class SetupResult:
    """Result of the zsh workflow."""

    report: ExecutionReport = field(default_factory=ExecutionReport)
    profile: Profile | None = None
    edit: EditResult | None = None
    shell: ShellChangeResult | None = None
    problems: list[str] = field(default_factory=list)
    dry_run: bool = False
    error: str | None = None

    @property
    def exit_code(self) -> int:
        return 1 if self.error else 0

    def to_dict(self) -> dict:
        result: dict = {
            "profile": self.profile.value if self.profile else None,
            "dry_run": self.dry_run,
            "report": self.report.to_dict(),
        }
        if self.error:
            result["error"] = self.error
        if self.edit:
            result["zshrc"] = self.edit.to_dict()
        if self.shell:
            result["shell"] = self.shell.to_dict()
        if self.problems:
            result["problems"] = self.problems
        return result


def zsh_package_tool() -> PackageTool:
    return PackageTool(key="zsh", label="Zsh", packages=ZSH_PACKAGES, executable=None)


def run_zsh_setup(
    settings: Settings,
    *,
    reporter: Reporter,
    runner: CommandRunner | None = None,
    registry: PackageManagerRegistry | None = None,
    change_shell: bool = True,
    dry_run: bool = False,
    shells_file: Path = SHELLS_FILE,
) -> SetupResult:
    """Install zsh, Oh My Zsh and plugins, then patch ``.zshrc``.

    Args:
        settings: Effective settings.
        reporter: Console reporter.
        runner: Command runner (tests pass a mock).
        registry: Package manager registry (tests pass a mock one).
        change_shell: Whether to make zsh the login shell.
        dry_run: Reconcile and report only.
        shells_file: Path of the ``/etc/shells`` list.

    Returns:
        SetupResult; ``error`` is set when a fatal step stopped the run.
    """
    result = SetupResult(dry_run=dry_run)
    result.report = ExecutionReport(run_id=generate_run_id(), automation="zsh")

    reporter.header("Starting Zsh and Oh My Zsh setup...")
    try:
        ctx = start_run(settings, reporter, runner=runner, registry=registry, dry_run=dry_run)
        result.profile = ctx.profile

        if dry_run:
            _report_plan(ctx, change_shell)
            return result

        _install(ctx, result, change_shell, shells_file)
    except DevSetupError as e:
        result.error = str(e)
        if not isinstance(e, FatalStepError):
            reporter.error(str(e))
        logger.error("zsh setup aborted: %s", e)

    reporter.summary(result.report)
    if result.error is None:
        reporter.success("Zsh setup complete!")
        reporter.note("Restart your terminal or run: source ~/.zshrc", fg="cyan")
    return result


def _install(
    ctx: RunContext,
    result: SetupResult,
    change_shell: bool,
    shells_file: Path,
) -> None:
    steps = StepRunner(ctx, result.report)
    zsh = ctx.settings.zsh

    # ── Packages ────────────────────────────────────────────────
    base = reconcile(ctx, [zsh_package_tool()])
    if not base.is_empty:
        ctx.reporter.info("Updating package index...")
        steps.run_fatal("Package index update", ctx.packages.update_index)
    steps.run_tools(base)

    # ── Framework ───────────────────────────────────────────────
    framework = OhMyZsh()
    if framework.is_present(ctx):
        ctx.reporter.warning("Oh My ZSH is already installed")
        result.report.add(Receipt.present(framework.label, metadata={"key": framework.key}))
    else:
        ctx.reporter.info("Installing Oh My ZSH...")
        receipt = steps.run_fatal("Oh My ZSH installation", lambda: framework.install(ctx))
        result.report.add(receipt)
        ctx.mark_present(framework.presence_key)
        ctx.reporter.success("Oh My ZSH installed successfully")

    # ── Plugins ─────────────────────────────────────────────────
    ctx.reporter.info("Installing Zsh plugins...")
    steps.run_tools(reconcile(ctx, plugin_tools(ctx.settings)))

    # ── .zshrc ──────────────────────────────────────────────────
    ctx.reporter.info("Configuring plugins in .zshrc...")
    edit = apply_plugin_config(zsh.zshrc_path(), zsh.plugins, zsh.extra_settings)
    result.edit = edit
    if edit.changed:
        ctx.reporter.success(f"Backed up .zshrc to {edit.backup}")
        ctx.reporter.success("Updated plugins in .zshrc")
    else:
        ctx.reporter.warning(".zshrc already configured")

    # ── Login shell ─────────────────────────────────────────────
    if change_shell:
        result.shell = change_login_shell(ctx, "zsh", shells_file=shells_file)
    else:
        ctx.reporter.info("Skipping default shell change")

    result.problems = verify(ctx)


def verify(ctx: RunContext) -> list[str]:
    """Re-check the end state. Problems are warnings, never fatal."""
    zsh = ctx.settings.zsh
    problems: list[str] = []

    if ctx.runner.which("zsh") is None:
        problems.append("zsh is not on PATH")
    if not zsh.framework_path().is_dir():
        problems.append(f"Oh My Zsh directory {zsh.framework_path()} is missing")
    for plugin in plugin_tools(ctx.settings):
        if not plugin.is_present(ctx):
            problems.append(f"plugin {plugin.key} is missing")
    if not is_applied(zsh.zshrc_path(), zsh.plugins, zsh.extra_settings):
        problems.append(f"{zsh.zshrc_path()} does not declare the expected plugins")

    for problem in problems:
        ctx.reporter.warning(f"Verification: {problem}")
    if not problems:
        ctx.reporter.success("Verification passed")
    return problems


def _report_plan(ctx: RunContext, change_shell: bool) -> None:
    """Dry run: say what would happen, touch nothing."""
    zsh = ctx.settings.zsh
    ctx.reporter.header("Dry run: nothing will be changed")

    wanted = zsh_packages(ctx.profile)
    needed = missing_packages(ctx, wanted)
    if needed:
        ctx.reporter.info(f"Would install packages: {' '.join(needed)}")
    else:
        ctx.reporter.warning("zsh packages are already installed")

    if OhMyZsh().is_present(ctx):
        ctx.reporter.warning("Oh My ZSH is already installed")
    else:
        ctx.reporter.info(f"Would install Oh My ZSH into {zsh.framework_path()}")

    plan = reconcile(ctx, plugin_tools(ctx.settings))
    for tool in plan.present:
        ctx.reporter.warning(f"{tool.label} is already installed")
    for tool in plan.missing:
        ctx.reporter.info(f"Would clone {tool.label}")

    try:
        if needs_update(zsh.zshrc_path(), zsh.plugins, zsh.extra_settings):
            ctx.reporter.info(f"Would update {zsh.zshrc_path()} (with backup)")
        else:
            ctx.reporter.warning(".zshrc already configured")
    except MissingConfigError:
        ctx.reporter.info(f"{zsh.zshrc_path()} will be created by the Oh My ZSH installer")

    if not change_shell:
        return
    current = current_login_shell(ctx.user)
    if Path(current).name == "zsh":
        ctx.reporter.warning("zsh is already the default shell")
    else:
        ctx.reporter.info(f"Would change default shell from {current or 'unknown'} to zsh")
