"""Shared helpers for CLI commands."""

from __future__ import annotations

import sys

import click

from devsetup.core.config.loader import ConfigError, find_settings_file, load_settings
from devsetup.core.models.settings import Settings
from devsetup.core.observability.reporter import Reporter


def load_settings_or_exit(ctx: click.Context) -> Settings:
    """Effective settings for this invocation; exit 1 on a bad file."""
    try:
        return load_settings(find_settings_file(ctx.obj.get("config_path")))
    except ConfigError as e:
        click.secho(f"[ERROR] {e}", fg="red", err=True)
        sys.exit(1)


def make_reporter(ctx: click.Context) -> Reporter:
    return Reporter(quiet=ctx.obj.get("quiet", False))
