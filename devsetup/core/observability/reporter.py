"""
Console reporter — leveled, colored status lines.

Every decision point of a run goes through here, so the console alone
is a full audit trail. Lines look like the classic setup scripts::

    [INFO] Detected distribution: debian-family
    [WARNING] git is already installed
    [ERROR] Failed to install zsh-autocomplete

Each line is also sent to the ``devsetup.report`` logger at DEBUG, so
``DEVSETUP_LOG_FILE`` captures the same story with timestamps.
"""

from __future__ import annotations

import logging

import click

from devsetup.core.engine.executor import ExecutionReport
from devsetup.core.observability.logging_config import REPORT_LOGGER

logger = logging.getLogger(REPORT_LOGGER)

_LEVELS: dict[str, str] = {
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "HEADER": "cyan",
    "SUCCESS": "green",
}


class Reporter:
    """Prints tagged status lines. Holds no run data."""

    def __init__(self, quiet: bool = False):
        self._quiet = quiet

    def _emit(self, tag: str, message: str) -> None:
        logger.debug("[%s] %s", tag, message)
        if self._quiet and tag in ("INFO", "HEADER"):
            return
        click.secho(f"[{tag}]", fg=_LEVELS[tag], nl=False)
        click.echo(f" {message}")

    def info(self, message: str) -> None:
        self._emit("INFO", message)

    def warning(self, message: str) -> None:
        self._emit("WARNING", message)

    def error(self, message: str) -> None:
        self._emit("ERROR", message)

    def header(self, message: str) -> None:
        self._emit("HEADER", message)

    def success(self, message: str) -> None:
        self._emit("SUCCESS", message)

    def note(self, message: str, fg: str | None = None) -> None:
        """Untagged line (menus, instructions, remediation commands)."""
        logger.debug("%s", message)
        click.secho(message, fg=fg)

    def summary(self, report: ExecutionReport) -> None:
        """End-of-run table: what got installed, what was there, what failed."""
        if report.total == 0:
            return

        click.echo()
        self.header(f"Summary — {report.automation}")
        for receipt in report.receipts:
            if receipt.status == "installed":
                self.success(f"{receipt.tool}: installed")
            elif receipt.status == "present":
                self.info(f"{receipt.tool}: already present")
            else:
                self.error(f"{receipt.tool}: failed ({receipt.error})")

        line = (
            f"{report.installed} installed, {report.present} already present, "
            f"{report.failed} failed"
        )
        if report.failed:
            self.warning(line)
        else:
            self.success(line)
