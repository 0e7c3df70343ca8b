"""Detected issue entity."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional
import uuid

from ..enums import IssueSeverity, IssueType
from ...utils.datetime import utc_now


@dataclass
class DetectedIssue:
    """A problem found by an audit step or reported by an operator."""
    type: IssueType
    severity: IssueSeverity
    title: str
    description: str
    run_id: Optional[str] = None
    file_path: Optional[str] = None
    line_number: Optional[int] = None
    recommendation: Optional[str] = None
    is_resolved: bool = False
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "audit_run_id": self.run_id,
            "type": self.type.value,
            "severity": self.severity.value,
            "title": self.title,
            "description": self.description,
            "file_path": self.file_path,
            "line_number": self.line_number,
            "recommendation": self.recommendation,
            "is_resolved": self.is_resolved,
            "created_at": self.created_at.isoformat(),
        }
