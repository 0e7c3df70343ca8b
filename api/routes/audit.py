"""
Audit run endpoints.

Start a run, list runs, inspect one run and poll its progress.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from typing import Any, Dict, List
import logging

from api.dependencies import get_run_controller
from core.domain.exceptions import ControllerFault, RunNotFoundError
from orchestration import RunController


logger = logging.getLogger(__name__)
router = APIRouter()


# =============================================================================
# START RUN
# =============================================================================

@router.post(
    "/start",
    status_code=status.HTTP_200_OK,
    summary="Start a full audit",
    description="Create a run and execute every audit step in the background",
)
async def start_audit(controller: RunController = Depends(get_run_controller)) -> Dict[str, str]:
    """
    Start a full audit run.

    Returns as soon as the run and its steps are recorded; progress is
    pushed over the WebSocket feed and available from the progress endpoint.
    """
    try:
        run_id = await controller.start_run()
    except ControllerFault as e:
        logger.error(f"Start audit failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to start audit",
        )

    return {"audit_run_id": run_id}


# =============================================================================
# LIST / GET RUNS
# =============================================================================

@router.get(
    "/runs",
    status_code=status.HTTP_200_OK,
    summary="List audit runs",
    description="All audit runs, newest first",
)
async def list_runs(controller: RunController = Depends(get_run_controller)) -> List[Dict[str, Any]]:
    runs = await controller.list_runs()
    return [run.to_dict() for run in runs]


@router.get(
    "/runs/{run_id}",
    status_code=status.HTTP_200_OK,
    summary="Get audit run details",
    description="A run with its steps and the issues it detected",
)
async def get_run(run_id: str, controller: RunController = Depends(get_run_controller)) -> Dict[str, Any]:
    try:
        details = await controller.get_run(run_id)
    except RunNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Audit run not found")
    return details.to_dict()


@router.get(
    "/runs/{run_id}/progress",
    status_code=status.HTTP_200_OK,
    summary="Get audit run progress",
    description="Step statuses and percent complete, for poll clients",
)
async def get_progress(run_id: str, controller: RunController = Depends(get_run_controller)) -> Dict[str, Any]:
    try:
        progress = await controller.get_progress(run_id)
    except RunNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Audit run not found")
    return progress.to_dict()
