"""
Result Models

Dataclass models for command outputs and stage results.
"""

from dataclasses import dataclass, field
from enum import Enum


class ResultStatus(Enum):
    """Status of a best-effort step."""

    SUCCESS = "success"
    FAILURE = "failure"
    SKIPPED = "skipped"


@dataclass
class ExecutionResult:
    """Result of a local command execution (git, rsync, ping, ssh probe)."""

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

    @property
    def output(self) -> str:
        """Get combined output (stdout + stderr)."""
        return f"{self.stdout}\n{self.stderr}".strip()

    def __repr__(self) -> str:
        return f"ExecutionResult(returncode={self.returncode}, command='{self.command[:50]}...')"


@dataclass
class SSHResult:
    """Result of an SSH command execution."""

    returncode: int
    stdout: str = ""
    stderr: str = ""
    host: str = ""
    command: str = ""
    duration_seconds: float = 0.0

    @property
    def is_success(self) -> bool:
        """Check if SSH command succeeded."""
        return self.returncode == 0

    @property
    def is_failure(self) -> bool:
        """Check if SSH command failed."""
        return self.returncode != 0

    @property
    def output(self) -> str:
        """Get combined output (stdout + stderr)."""
        return f"{self.stdout}\n{self.stderr}".strip()

    def __repr__(self) -> str:
        return f"SSHResult(host={self.host}, returncode={self.returncode}, duration={self.duration_seconds:.2f}s)"


@dataclass
class ValidationResult:
    """Result of the post-deployment validation."""

    warnings: list[str] = field(default_factory=list)

    def add_warning(self, warning: str) -> None:
        self.warnings.append(warning)

    def __repr__(self) -> str:
        return f"ValidationResult(warnings={len(self.warnings)})"


@dataclass
class StepOutcome:
    """Outcome of one best-effort step."""

    name: str
    status: ResultStatus
    detail: str = ""

    @property
    def succeeded(self) -> bool:
        return self.status is not ResultStatus.FAILURE


@dataclass
class CleanupReport:
    """Collects the outcome of every cleanup step without aborting."""

    outcomes: list[StepOutcome] = field(default_factory=list)

    def record(self, name: str, status: ResultStatus, detail: str = "") -> StepOutcome:
        outcome = StepOutcome(name=name, status=status, detail=detail)
        self.outcomes.append(outcome)
        return outcome

    def count(self, status: ResultStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status is status)

    @property
    def failures(self) -> list[StepOutcome]:
        return [outcome for outcome in self.outcomes if outcome.status is ResultStatus.FAILURE]

    def summary(self) -> str:
        """Get summary string of cleanup steps."""
        return (
            f"{self.count(ResultStatus.SUCCESS)} succeeded, "
            f"{self.count(ResultStatus.SKIPPED)} skipped, "
            f"{self.count(ResultStatus.FAILURE)} failed"
        )
