"""
devsetup — CLI entrypoint.

Usage:
    devsetup --help
    devsetup detect
    devsetup zsh
    devsetup apps --select "1 5"
    devsetup config check
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from devsetup import __version__
from devsetup.core.observability.logging_config import setup_logging

EXIT_INTERRUPTED = 130


class DevSetupGroup(click.Group):
    """Group that turns Ctrl-C into a clean exit 130.

    ``click.prompt`` reports Ctrl-C (and EOF) as ``Abort``.
    """

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except (KeyboardInterrupt, click.Abort):
            click.echo()
            click.secho("[ERROR] Interrupted", fg="red", err=True)
            ctx.exit(EXIT_INTERRUPTED)


@click.group(cls=DevSetupGroup)
@click.version_option(version=__version__, prog_name="devsetup")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to config.yml (default: ~/.config/devsetup/config.yml).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """devsetup — set up zsh and developer tools on Arch and Debian hosts."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path).expanduser() if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("DEVSETUP_LOG_LEVEL", "WARNING")

    setup_logging(
        level=level,
        log_file=os.environ.get("DEVSETUP_LOG_FILE"),
        log_file_level=os.environ.get("DEVSETUP_LOG_FILE_LEVEL"),
    )


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def detect(ctx: click.Context, as_json: bool) -> None:
    """Show the detected distribution and host profile."""
    from devsetup.core.use_cases.detect import run_detect
    from devsetup.ui.cli._common import load_settings_or_exit

    result = run_detect(load_settings_or_exit(ctx))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.supported else 1)

    host = result.host
    click.secho(f"Host: {host.display_name if host else 'unknown'}", fg="cyan", bold=True)
    if host:
        click.echo(f"   ID: {host.id or '-'}")
        click.echo(f"   ID_LIKE: {' '.join(host.id_like) or '-'}")
        click.echo(f"   VERSION_ID: {host.version_id or '-'}")
    else:
        click.echo(f"   {result.os_release} could not be read")

    if result.supported:
        click.secho(f"   Profile: {result.profile.value}", fg="green")
        click.echo(f"   Package manager: {result.package_manager}")
    else:
        click.secho(f"   Profile: {result.profile.value} (unsupported)", fg="red")
        sys.exit(1)


@cli.group()
def config() -> None:
    """Settings file commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate the settings file and show the effective settings."""
    from devsetup.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        assert result.settings is not None  # guaranteed when valid
        settings = result.settings
        source = result.config_path or "built-in defaults"
        click.secho("Configuration is valid", fg="green", bold=True)
        click.echo(f"   Source: {source}")
        click.echo(f"   Timeouts: network {settings.network_timeout}s, "
                   f"packages {settings.package_timeout}s")
        click.echo(f"   Oh My Zsh: {settings.zsh.framework_path()}")
        click.echo(f"   Plugins: {' '.join(settings.zsh.plugins)}")
        click.echo(f"   NVM {settings.apps.nvm_version}, Go {settings.apps.go_version}")
    else:
        click.secho("Configuration errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        sys.exit(1)


# ── Workflow commands ───────────────────────────────────────────

from devsetup.ui.cli.apps import apps  # noqa: E402
from devsetup.ui.cli.zsh import zsh  # noqa: E402

cli.add_command(zsh)
cli.add_command(apps)


if __name__ == "__main__":
    cli()
