"""Application DTOs."""

from .dashboard_dto import (
    ConnectionStatusDTO,
    DashboardSummaryDTO,
    DependencyStatusDTO,
    EnvironmentStatusDTO,
)
from .environment_dto import (
    CreateEnvironmentVarRequest,
    ExampleFileDTO,
    ServiceValidationDTO,
    UpdateEnvironmentVarRequest,
)
from .issue_dto import CreateIssueRequest, UpdateIssueRequest

__all__ = [
    "ConnectionStatusDTO",
    "CreateEnvironmentVarRequest",
    "CreateIssueRequest",
    "DashboardSummaryDTO",
    "DependencyStatusDTO",
    "EnvironmentStatusDTO",
    "ExampleFileDTO",
    "ServiceValidationDTO",
    "UpdateEnvironmentVarRequest",
    "UpdateIssueRequest",
]
