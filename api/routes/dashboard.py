"""Dashboard summary endpoint."""
from fastapi import APIRouter, Depends, status

from api.dependencies import get_dashboard_service
from core.application.dtos import DashboardSummaryDTO
from core.application.services import DashboardService


router = APIRouter()


@router.get(
    "/summary",
    status_code=status.HTTP_200_OK,
    response_model=DashboardSummaryDTO,
    summary="Dashboard summary",
    description="Latest run, build and dependency status, issue counts",
)
async def get_summary(service: DashboardService = Depends(get_dashboard_service)) -> DashboardSummaryDTO:
    return await service.get_summary()
