"""
Result Models

Dataclass models for operation results and command outputs.
"""

from dataclasses import dataclass
from enum import Enum


class StepStatus(Enum):
    """Outcome of a pipeline step."""

    RAN = "ran"
    SKIPPED = "skipped"
    PENDING = "pending"
    DONE = "done"


@dataclass
class ExecutionResult:
    """Result of a command execution."""

    returncode: int
    stdout: str = ""
    stderr: str = ""
    command: str = ""

    @property
    def is_success(self) -> bool:
        """Check if execution succeeded."""
        return self.returncode == 0

    @property
    def is_failure(self) -> bool:
        """Check if execution failed."""
        return self.returncode != 0

    def __repr__(self) -> str:
        return f"ExecutionResult(returncode={self.returncode}, command='{self.command[:50]}...')"


@dataclass
class StepResult:
    """Result of running (or describing) a single step."""

    name: str
    description: str
    status: StepStatus

    @property
    def skipped(self) -> bool:
        return self.status in (StepStatus.SKIPPED, StepStatus.DONE)


@dataclass
class CheckResult:
    """Result of a single preflight check."""

    name: str
    ok: bool
    detail: str = ""
