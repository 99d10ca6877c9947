"""
Error taxonomy — everything that aborts a run.

Recoverable failures (one optional tool not installing) are never
exceptions; they travel as ``Receipt(status="failed")``. What lives
here is fatal: the CLI turns any ``DevSetupError`` into a red one-line
diagnostic and exit code 1.
"""

from __future__ import annotations


class DevSetupError(Exception):
    """Base class for fatal devsetup errors."""


class UnsupportedHostError(DevSetupError):
    """The host could not be classified into a supported profile."""


class MissingConfigError(DevSetupError):
    """A file a previous step should have produced does not exist."""


class ConfigEditError(DevSetupError):
    """The config file could not be edited; the original is untouched."""


class FatalStepError(DevSetupError):
    """A load-bearing step failed, so nothing after it can run."""

    def __init__(self, step: str, reason: str) -> None:
        self.step = step
        self.reason = reason
        super().__init__(f"{step} failed: {reason}")
