"""
Interactive tool menu.

    1) Docker CE
    ...
    7) All
    q) Quit

Input is validated against the menu; anything else re-prompts.
"""

from __future__ import annotations

from typing import Callable

import click

from devsetup.core.engine.reconciler import all_token, parse_selection
from devsetup.core.services.tools.base import Installable

QUIT = "q"


def show_menu(menu: list[Installable]) -> None:
    click.echo()
    click.secho("Select the tools to install:", fg="cyan", bold=True)
    for number, tool in enumerate(menu, start=1):
        click.echo(f"  {number}) {tool.label}")
    click.echo(f"  {all_token(menu)}) All")
    click.echo(f"  {QUIT}) Quit")
    click.echo()


def prompt_selection(menu: list[Installable]) -> list[Installable] | None:
    """Show the menu and read one valid selection. ``None`` means quit."""
    show_menu(menu)
    while True:
        text = click.prompt(
            "Enter your choices (numbers separated by spaces)",
            default="",
            show_default=False,
        ).strip()
        if not text:
            click.secho("Please enter a selection.", fg="yellow")
            continue
        if text.lower() == QUIT:
            return None

        selection = parse_selection(text, menu)
        if selection is None:
            click.secho(
                f"Invalid selection: {text!r}. Use numbers 1-{all_token(menu)} "
                f"or {QUIT} to quit.",
                fg="red",
            )
            continue
        return selection


def fixed_selection(text: str) -> Callable[[list[Installable]], list[Installable] | None]:
    """Chooser for ``--select``: parse once, fail instead of re-prompting."""

    def choose(menu: list[Installable]) -> list[Installable] | None:
        if text.strip().lower() == QUIT:
            return None
        selection = parse_selection(text, menu)
        if selection is None:
            raise click.BadParameter(
                f"{text!r} is not a valid selection (1-{all_token(menu)})",
                param_hint="--select",
            )
        return selection

    return choose
