"""Domain layer - pure domain models and interfaces."""

from .entities import ApiConnection, AuditRun, AuditStep, DetectedIssue, EnvironmentVar
from .enums import ConnectionStatus, IssueSeverity, IssueType, RunStatus, StepStatus
from .providers import PROVIDERS, Provider, detect_provider, get_provider
from .repositories import AuditStore

__all__ = [
    "ApiConnection",
    "AuditRun",
    "AuditStep",
    "AuditStore",
    "ConnectionStatus",
    "DetectedIssue",
    "EnvironmentVar",
    "IssueSeverity",
    "IssueType",
    "PROVIDERS",
    "Provider",
    "RunStatus",
    "StepStatus",
    "detect_provider",
    "get_provider",
]
