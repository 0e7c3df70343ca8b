"""
Detected issue endpoints.

List, report and update the issues found by audits.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import Any, Dict, List, Optional
import logging

from api.dependencies import get_issue_service
from core.application.dtos import CreateIssueRequest, UpdateIssueRequest
from core.application.services import IssueApplicationService
from core.domain.exceptions import RecordNotFoundError


logger = logging.getLogger(__name__)
router = APIRouter()


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    summary="List detected issues",
    description="All issues, or the issues of one run ordered by severity",
)
async def list_issues(
    audit_run_id: Optional[str] = Query(default=None, description="Only issues of this run"),
    service: IssueApplicationService = Depends(get_issue_service),
) -> List[Dict[str, Any]]:
    issues = await service.list_issues(audit_run_id)
    return [issue.to_dict() for issue in issues]


@router.post(
    "",
    status_code=status.HTTP_200_OK,
    summary="Report an issue",
)
async def create_issue(
    request: CreateIssueRequest,
    service: IssueApplicationService = Depends(get_issue_service),
) -> Dict[str, Any]:
    """
    Report an issue by hand.

    The new issue is broadcast as `issue_detected`.
    """
    issue = await service.report_issue(request)
    return issue.to_dict()


@router.put(
    "/{issue_id}",
    status_code=status.HTTP_200_OK,
    summary="Update an issue",
)
async def update_issue(
    issue_id: str,
    request: UpdateIssueRequest,
    service: IssueApplicationService = Depends(get_issue_service),
) -> Dict[str, Any]:
    """
    Update resolution, severity, description or recommendation.

    The updated issue is broadcast as `issue_updated`.
    """
    try:
        issue = await service.update_issue(issue_id, request)
    except RecordNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Issue not found")
    return issue.to_dict()
