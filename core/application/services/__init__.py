"""Application services."""
from .connection_service import ConnectionService
from .dashboard_service import DashboardService
from .environment_service import EnvironmentService
from .issue_service import IssueApplicationService

__all__ = [
    "ConnectionService",
    "DashboardService",
    "EnvironmentService",
    "IssueApplicationService",
]
