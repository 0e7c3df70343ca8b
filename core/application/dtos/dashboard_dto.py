"""Application DTOs for the dashboard summary."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class DependencyStatusDTO(BaseModel):
    """Outcome of the dependency install step of the latest run."""

    status: str = Field(..., description="Step status, or 'unknown' without a run")
    installed: bool = Field(..., description="True when the install step succeeded")

    model_config = {"frozen": True}


class EnvironmentStatusDTO(BaseModel):
    """Managed environment variables and per-provider completeness."""

    total_vars: int = Field(..., ge=0)
    active_vars: int = Field(..., ge=0)
    services: Dict[str, bool] = Field(
        default_factory=dict, description="Provider name -> every required variable set"
    )

    model_config = {"frozen": True}


class ConnectionStatusDTO(BaseModel):
    """Outcome of the latest provider connection checks."""

    connected: int = Field(..., ge=0)
    total: int = Field(..., ge=0, description="Providers checked at least once")
    percentage: int = Field(..., ge=0, le=100)

    model_config = {"frozen": True}


class DashboardSummaryDTO(BaseModel):
    """Response DTO for the dashboard overview."""

    last_audit_run: Optional[Dict[str, Any]] = Field(None, description="Latest run, if any")
    step_counts: Dict[str, int] = Field(default_factory=dict, description="Step count per status")
    build_status: str = Field(..., description="'Ready' when the latest run completed")
    dependencies: DependencyStatusDTO
    environment: EnvironmentStatusDTO
    api_connections: ConnectionStatusDTO
    total_issues: int = Field(..., ge=0, description="Total detected issues")
    critical_issues: int = Field(..., ge=0, description="Unresolved critical issues")
    poll_interval_seconds: float = Field(..., gt=0, description="Suggested progress poll interval")

    model_config = {"frozen": True}
