"""Application layer - services and DTOs."""

from .dtos import (
    ConnectionStatusDTO,
    CreateEnvironmentVarRequest,
    CreateIssueRequest,
    DashboardSummaryDTO,
    DependencyStatusDTO,
    EnvironmentStatusDTO,
    ExampleFileDTO,
    ServiceValidationDTO,
    UpdateEnvironmentVarRequest,
    UpdateIssueRequest,
)
from .services import ConnectionService, DashboardService, EnvironmentService, IssueApplicationService

__all__ = [
    # DTOs
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
    # Services
    "ConnectionService",
    "DashboardService",
    "EnvironmentService",
    "IssueApplicationService",
]
