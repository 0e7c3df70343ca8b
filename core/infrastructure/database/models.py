"""
SQLAlchemy ORM Models.

Maps audit entities to database tables.
"""
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


# =============================================================================
# AUDIT RUN MODEL
# =============================================================================

class AuditRunModel(Base):
    """One invocation of the audit step sequence."""

    __tablename__ = "audit_runs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending", index=True)
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    results: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)
    logs: Mapped[Any] = mapped_column(JSON, nullable=False, default=list)

    __table_args__ = (
        Index("ix_audit_runs_started_at", "started_at"),
    )

    def __repr__(self):
        return f"<AuditRunModel(id={self.id}, status={self.status})>"


# =============================================================================
# AUDIT STEP MODEL
# =============================================================================

class AuditStepModel(Base):
    """One named step belonging to an audit run."""

    __tablename__ = "audit_steps"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    audit_run_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("audit_runs.id"), nullable=False, index=True
    )
    step_name: Mapped[str] = mapped_column(String(100), nullable=False)
    step_order: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    output: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    started_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("ix_audit_steps_run_order", "audit_run_id", "step_order"),
    )

    def __repr__(self):
        return f"<AuditStepModel(id={self.id}, name={self.step_name}, status={self.status})>"


# =============================================================================
# DETECTED ISSUE MODEL
# =============================================================================

class DetectedIssueModel(Base):
    """A problem found during an audit or reported by an operator."""

    __tablename__ = "detected_issues"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    audit_run_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("audit_runs.id"), nullable=True, index=True
    )
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    severity: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    file_path: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    line_number: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    recommendation: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_resolved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<DetectedIssueModel(id={self.id}, severity={self.severity}, title={self.title})>"


# =============================================================================
# ENVIRONMENT VARIABLE MODEL
# =============================================================================

class EnvironmentVarModel(Base):
    """A storefront environment variable managed from the dashboard."""

    __tablename__ = "environment_vars"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    key: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    service: Mapped[Optional[str]] = mapped_column(String(50), nullable=True, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<EnvironmentVarModel(id={self.id}, key={self.key})>"


# =============================================================================
# API CONNECTION MODEL
# =============================================================================

class ApiConnectionModel(Base):
    """Latest connection check of one third-party provider."""

    __tablename__ = "api_connections"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    service: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="disconnected")
    last_checked: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    response_time_ms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    def __repr__(self):
        return f"<ApiConnectionModel(service={self.service}, status={self.status})>"
