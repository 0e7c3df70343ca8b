"""Application service for detected issues."""

from typing import List, Optional

from core.application.dtos.issue_dto import CreateIssueRequest, UpdateIssueRequest
from core.domain.entities import DetectedIssue
from core.domain.exceptions import RecordNotFoundError
from core.domain.repositories import AuditStore
from core.infrastructure.logging import get_logger
from core.utils.datetime import utc_now
from orchestration.bus import NotifierProtocol
from orchestration.events import Event, EventMetadata, EventType


class IssueApplicationService:
    """
    Application service for listing, reporting and updating issues.

    Responsibilities:
    - Transform between DTOs and domain entities
    - Persist via the audit store
    - Broadcast issue_detected / issue_updated
    """

    def __init__(self, store: AuditStore, notifier: NotifierProtocol) -> None:
        """Initialize issue application service.

        Args:
            store: Status store holding the issues
            notifier: Notifier for issue events
        """
        self._store = store
        self._notifier = notifier
        self._logger = get_logger("application.issue_service")

    async def list_issues(self, audit_run_id: Optional[str] = None) -> List[DetectedIssue]:
        return await self._store.list_issues(audit_run_id)

    async def report_issue(self, request: CreateIssueRequest) -> DetectedIssue:
        """Create an issue and broadcast ``issue_detected``.

        Args:
            request: CreateIssueRequest DTO

        Returns:
            The stored issue
        """
        issue = DetectedIssue(
            type=request.type,
            severity=request.severity,
            title=request.title,
            description=request.description,
            run_id=request.audit_run_id,
            file_path=request.file_path,
            line_number=request.line_number,
            recommendation=request.recommendation,
        )
        stored = await self._store.create_issue(issue)
        self._logger.info(f"Issue reported: {stored.id} ({stored.severity.value})")
        await self._publish(EventType.ISSUE_DETECTED, stored)
        return stored

    async def update_issue(self, issue_id: str, request: UpdateIssueRequest) -> DetectedIssue:
        """Apply the fields set on ``request`` and broadcast ``issue_updated``.

        Raises:
            RecordNotFoundError: If the issue does not exist
        """
        issue = await self._store.get_issue(issue_id)
        if issue is None:
            raise RecordNotFoundError("Detected issue", issue_id)

        for name, value in request.model_dump(exclude_unset=True).items():
            setattr(issue, name, value)

        stored = await self._store.update_issue(issue)
        self._logger.info(f"Issue updated: {stored.id} (resolved={stored.is_resolved})")
        await self._publish(EventType.ISSUE_UPDATED, stored)
        return stored

    async def _publish(self, event_type: EventType, issue: DetectedIssue) -> None:
        await self._notifier.broadcast(
            Event(
                type=event_type,
                payload={"issue": issue.to_dict()},
                metadata=EventMetadata(run_id=issue.run_id, timestamp=utc_now()),
            )
        )
