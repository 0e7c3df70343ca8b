"""Application DTOs for detected issues."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from core.domain.enums import IssueSeverity, IssueType


class CreateIssueRequest(BaseModel):
    """Request DTO for reporting an issue by hand."""

    type: IssueType = Field(..., description="Issue category")
    severity: IssueSeverity = Field(..., description="Issue severity")
    title: str = Field(..., min_length=1, description="Short title")
    description: str = Field(..., description="What was found")
    audit_run_id: Optional[str] = Field(None, description="Run the issue belongs to")
    file_path: Optional[str] = Field(None, description="Affected file")
    line_number: Optional[int] = Field(None, ge=1, description="Affected line")
    recommendation: Optional[str] = Field(None, description="Suggested fix")

    model_config = {"frozen": True}


class UpdateIssueRequest(BaseModel):
    """Request DTO for updating an issue.

    Omitted fields stay unchanged. ``recommendation`` may be sent as null to
    clear it; the other fields must carry a value when present.
    """

    is_resolved: Optional[bool] = Field(None, description="Resolution flag")
    severity: Optional[IssueSeverity] = Field(None, description="New severity")
    description: Optional[str] = Field(None, description="New description")
    recommendation: Optional[str] = Field(None, description="New recommendation")

    model_config = {"frozen": True, "extra": "forbid"}

    @field_validator("is_resolved", "severity", "description")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field may not be null")
        return v
