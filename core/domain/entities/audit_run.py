"""
Audit run aggregate.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional
import uuid

from ..enums import RunStatus
from ..exceptions import InvalidTransitionError
from ...utils.datetime import utc_now


@dataclass
class AuditRun:
    """
    One invocation of the full audit step sequence.

    Status moves pending -> running -> completed|failed. A run is completed
    once every step reached a terminal status, whatever the step outcomes;
    failed is reserved for controller faults.
    """
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    status: RunStatus = RunStatus.PENDING
    started_at: datetime = field(default_factory=utc_now)
    completed_at: Optional[datetime] = None
    results: Optional[Dict[str, Any]] = None
    logs: List[str] = field(default_factory=list)

    def mark_running(self) -> None:
        if self.status is not RunStatus.PENDING:
            raise InvalidTransitionError(
                f"Run {self.id} cannot start from status {self.status.value}", run_id=self.id
            )
        self.status = RunStatus.RUNNING
        self.logs.append("run started")

    def mark_completed(self, results: Dict[str, Any]) -> None:
        if self.status is not RunStatus.RUNNING:
            raise InvalidTransitionError(
                f"Run {self.id} cannot complete from status {self.status.value}", run_id=self.id
            )
        self.status = RunStatus.COMPLETED
        self.completed_at = utc_now()
        self.results = results
        self.logs.append("run completed")

    def mark_failed(self, error: str) -> None:
        """Controller fault; allowed from any non-terminal status."""
        if self.status.is_terminal:
            raise InvalidTransitionError(
                f"Run {self.id} already finished with status {self.status.value}", run_id=self.id
            )
        self.status = RunStatus.FAILED
        self.completed_at = utc_now()
        self.results = {**(self.results or {}), "error": error}
        self.logs.append(f"run failed: {error}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "status": self.status.value,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "results": self.results,
            "logs": list(self.logs),
        }
