"""Orchestration models - StepContext, StepOutcome, RunProgress, RunDetails."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from core.domain.entities import AuditRun, AuditStep, DetectedIssue
from core.settings import AuditSettings

from .executor import CommandExecutor

IssueReporter = Callable[[DetectedIssue], Awaitable[DetectedIssue]]


@dataclass
class StepContext:
    """Everything a step activity may use while it runs."""

    run_id: str
    step_name: str
    executor: CommandExecutor
    settings: AuditSettings
    report_issue: IssueReporter


@dataclass
class StepOutcome:
    """Result of a step activity."""

    success: bool
    output: str | None
    error: str | None = None

    @property
    def error_message(self) -> str | None:
        if self.success:
            return None
        return self.error if self.error is not None else self.output


@dataclass
class RunProgress:
    """Progress of a run as seen by poll clients."""

    steps: list[AuditStep]
    percent_complete: int
    is_complete: bool

    @classmethod
    def from_steps(cls, steps: list[AuditStep]) -> "RunProgress":
        total = len(steps)
        completed = sum(1 for s in steps if s.is_terminal)
        # floor keeps 100 reserved for a finished run
        percent = (completed * 100) // total if total else 0
        return cls(steps=steps, percent_complete=percent, is_complete=completed == total)

    def to_dict(self) -> dict[str, object]:
        return {
            "steps": [s.to_dict() for s in self.steps],
            "progress": self.percent_complete,
            "is_complete": self.is_complete,
        }


@dataclass
class RunDetails:
    """A run with its steps and detected issues."""

    run: AuditRun
    steps: list[AuditStep] = field(default_factory=list)
    issues: list[DetectedIssue] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "run": self.run.to_dict(),
            "steps": [s.to_dict() for s in self.steps],
            "issues": [i.to_dict() for i in self.issues],
        }
