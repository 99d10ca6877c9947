"""
CLI command for the zsh workflow.

Thin wrapper over ``devsetup.core.use_cases.zsh_setup``.
"""

from __future__ import annotations

import json
import sys

import click

from devsetup.ui.cli._common import load_settings_or_exit, make_reporter


@click.command()
@click.option("--dry-run", is_flag=True, help="Show what would change, change nothing.")
@click.option(
    "--no-shell-change",
    is_flag=True,
    help="Leave the login shell alone.",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Also print the result as JSON.")
@click.pass_context
def zsh(ctx: click.Context, dry_run: bool, no_shell_change: bool, as_json: bool) -> None:
    """Install zsh, Oh My Zsh and plugins; configure .zshrc."""
    from devsetup.core.use_cases.zsh_setup import run_zsh_setup

    settings = load_settings_or_exit(ctx)
    result = run_zsh_setup(
        settings,
        reporter=make_reporter(ctx),
        runner=ctx.obj.get("runner"),
        registry=ctx.obj.get("registry"),
        change_shell=not no_shell_change,
        dry_run=dry_run,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    sys.exit(result.exit_code)
