"""
CommandResult and Receipt models — the execution contract.

A CommandResult is what one external process produced. A Receipt is
the per-tool outcome of a run: already present, installed, or failed.
The step runner collects receipts; the reporter prints them. Failures
are captured here, never raised across the runner boundary.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class CommandResult(BaseModel):
    """Outcome of a single external command."""

    command: list[str] = Field(default_factory=list)
    returncode: int | None = None
    stdout: str = ""
    stderr: str = ""
    duration_ms: int = 0
    timed_out: bool = False
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.timed_out and self.error is None

    @classmethod
    def success(cls, command: list[str], stdout: str = "", **kwargs: Any) -> CommandResult:
        return cls(command=command, returncode=0, stdout=stdout, **kwargs)

    @classmethod
    def failure(
        cls,
        command: list[str],
        error: str,
        returncode: int | None = 1,
        **kwargs: Any,
    ) -> CommandResult:
        return cls(command=command, returncode=returncode, error=error, **kwargs)


class Receipt(BaseModel):
    """Result of reconciling and installing one tool.

    ``present`` means the tool was already there and nothing ran.
    """

    tool: str
    status: Literal["installed", "present", "failed"] = "installed"

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    output: str = ""
    error: str | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the tool ended up available."""
        return self.status != "failed"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def installed(cls, tool: str, output: str = "", **kwargs: Any) -> Receipt:
        """Create an installed receipt."""
        return cls(tool=tool, status="installed", output=output, **kwargs)

    @classmethod
    def present(cls, tool: str, **kwargs: Any) -> Receipt:
        """Create an already-present receipt."""
        return cls(tool=tool, status="present", output="already present", **kwargs)

    @classmethod
    def failure(cls, tool: str, error: str, **kwargs: Any) -> Receipt:
        """Create a failure receipt."""
        return cls(tool=tool, status="failed", error=error, **kwargs)
