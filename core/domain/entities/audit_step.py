"""Audit step entity."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional
import uuid

from ..enums import StepStatus
from ..exceptions import InvalidTransitionError
from ...utils.datetime import utc_now


@dataclass
class AuditStep:
    """
    One named unit of work within a run.

    Status is monotonic: pending -> running -> success|failed. Neither
    transition can be repeated or skipped.
    """
    run_id: str
    name: str
    order: int
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    status: StepStatus = StepStatus.PENDING
    output: Optional[str] = None
    error_message: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    def mark_running(self) -> None:
        if self.status is not StepStatus.PENDING:
            raise InvalidTransitionError(
                f"Step {self.name!r} cannot start from status {self.status.value}",
                run_id=self.run_id,
            )
        self.status = StepStatus.RUNNING
        self.started_at = utc_now()

    def finish(self, success: bool, output: Optional[str], error_message: Optional[str] = None) -> None:
        if self.status is not StepStatus.RUNNING:
            raise InvalidTransitionError(
                f"Step {self.name!r} cannot finish from status {self.status.value}",
                run_id=self.run_id,
            )
        self.status = StepStatus.SUCCESS if success else StepStatus.FAILED
        self.output = output
        self.error_message = None if success else error_message
        self.completed_at = utc_now()

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "audit_run_id": self.run_id,
            "step_name": self.name,
            "step_order": self.order,
            "status": self.status.value,
            "output": self.output,
            "error_message": self.error_message,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }
