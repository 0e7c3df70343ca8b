"""API connection entity."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional
import uuid

from ..enums import ConnectionStatus
from ...utils.datetime import utc_now


@dataclass
class ApiConnection:
    """Result of the latest connection check against one provider."""
    service: str
    status: ConnectionStatus = ConnectionStatus.DISCONNECTED
    last_checked: Optional[datetime] = None
    error_message: Optional[str] = None
    response_time_ms: Optional[int] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def record_check(self, success: bool, error_message: Optional[str], response_time_ms: int) -> None:
        """Store the outcome of a check."""
        self.status = ConnectionStatus.CONNECTED if success else ConnectionStatus.ERROR
        self.error_message = error_message
        self.response_time_ms = response_time_ms
        self.last_checked = utc_now()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "service": self.service,
            "status": self.status.value,
            "last_checked": self.last_checked.isoformat() if self.last_checked else None,
            "error_message": self.error_message,
            "response_time": f"{self.response_time_ms}ms" if self.response_time_ms is not None else None,
        }
