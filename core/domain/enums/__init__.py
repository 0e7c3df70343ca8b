"""Domain enums."""

from .audit_status import ConnectionStatus, IssueSeverity, IssueType, RunStatus, StepStatus

__all__ = ["ConnectionStatus", "IssueSeverity", "IssueType", "RunStatus", "StepStatus"]
