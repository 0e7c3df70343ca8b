"""Orchestration events - EventType, Event, EventMetadata."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class EventType(str, Enum):
    """Discriminator carried by every broadcast event."""

    AUDIT_STARTED = "audit_started"
    STEP_STARTED = "step_started"
    STEP_COMPLETED = "step_completed"
    AUDIT_COMPLETED = "audit_completed"
    AUDIT_FAILED = "audit_failed"
    ISSUE_DETECTED = "issue_detected"
    ISSUE_UPDATED = "issue_updated"
    CONNECTION_TESTED = "connection_tested"
    CONNECTIONS_TESTED = "connections_tested"


@dataclass
class EventMetadata:
    """Metadata for an event."""

    run_id: str | None
    timestamp: datetime


@dataclass
class Event:
    """State transition pushed to listeners."""

    type: EventType
    payload: dict[str, object]
    metadata: EventMetadata

    def to_dict(self) -> dict[str, object]:
        """JSON-ready form sent over the WebSocket feed."""
        return {
            "type": self.type.value,
            "run_id": self.metadata.run_id,
            "timestamp": self.metadata.timestamp.isoformat(),
            "data": self.payload,
        }
