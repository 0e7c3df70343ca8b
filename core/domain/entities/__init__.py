"""Domain entities."""

from .api_connection import ApiConnection
from .audit_run import AuditRun
from .audit_step import AuditStep
from .detected_issue import DetectedIssue
from .environment_var import EnvironmentVar

__all__ = ["ApiConnection", "AuditRun", "AuditStep", "DetectedIssue", "EnvironmentVar"]
