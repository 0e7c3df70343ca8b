"""Application DTOs for storefront environment variables."""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

ENV_KEY_PATTERN = r"^[A-Za-z_][A-Za-z0-9_]*$"


class CreateEnvironmentVarRequest(BaseModel):
    """Request DTO for adding an environment variable."""

    key: str = Field(..., pattern=ENV_KEY_PATTERN, description="Variable name")
    value: str = Field(..., description="Variable value")
    service: Optional[str] = Field(None, description="Owning provider; detected from the key when omitted")
    is_active: bool = Field(True, description="Counted when validating services")

    model_config = {"frozen": True}


class UpdateEnvironmentVarRequest(BaseModel):
    """Request DTO for editing a variable; omitted fields stay unchanged."""

    key: Optional[str] = Field(None, pattern=ENV_KEY_PATTERN, description="New name")
    value: Optional[str] = Field(None, description="New value")
    service: Optional[str] = Field(None, description="New owning provider, null to clear")
    is_active: Optional[bool] = Field(None, description="Active flag")

    model_config = {"frozen": True, "extra": "forbid"}

    @field_validator("key", "value", "is_active")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field may not be null")
        return v


class ServiceValidationDTO(BaseModel):
    """Response DTO for a provider configuration check."""

    service: str
    valid: bool = Field(..., description="True when every required variable is set")
    missing_vars: List[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class ExampleFileDTO(BaseModel):
    """Response DTO for generating the storefront's .env.example."""

    success: bool
    created: bool = Field(..., description="False when an existing file was left alone")
    path: str

    model_config = {"frozen": True}
