"""
Audit Status Enums.

Status values for audit runs, audit steps and detected issues.
"""
from enum import Enum


class RunStatus(str, Enum):
    """Lifecycle of one audit run."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (RunStatus.COMPLETED, RunStatus.FAILED)


class StepStatus(str, Enum):
    """Lifecycle of one step within a run."""

    PENDING = "pending"
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (StepStatus.SUCCESS, StepStatus.FAILED)


class IssueType(str, Enum):
    """Category of a detected issue."""

    FORM_INPUT = "form_input"
    API_CONNECTION = "api_connection"
    ENVIRONMENT = "environment"
    BUILD = "build"


class IssueSeverity(str, Enum):
    """Severity of a detected issue, most severe first."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return list(IssueSeverity).index(self)


class ConnectionStatus(str, Enum):
    """Last known state of a third-party API connection."""

    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    ERROR = "error"
