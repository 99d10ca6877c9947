"""
CLI command for the developer tools menu.

Thin wrapper over ``devsetup.core.use_cases.apps_install``.
"""

from __future__ import annotations

import json
import sys

import click

from devsetup.ui.cli._common import load_settings_or_exit, make_reporter
from devsetup.ui.cli.menu import fixed_selection, prompt_selection


@click.command()
@click.option(
    "--select",
    "selection",
    default=None,
    help='Menu numbers without prompting, e.g. "1 3" (use the last number for all).',
)
@click.option("--dry-run", is_flag=True, help="Show what would be installed, install nothing.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Also print the result as JSON.")
@click.pass_context
def apps(ctx: click.Context, selection: str | None, dry_run: bool, as_json: bool) -> None:
    """Install developer tools (Docker, Nginx, NVM, GVM, Python, Vim)."""
    from devsetup.core.use_cases.apps_install import run_apps_install

    settings = load_settings_or_exit(ctx)
    choose = fixed_selection(selection) if selection is not None else prompt_selection

    result = run_apps_install(
        settings,
        reporter=make_reporter(ctx),
        choose=choose,
        runner=ctx.obj.get("runner"),
        registry=ctx.obj.get("registry"),
        dry_run=dry_run,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    sys.exit(result.exit_code)
