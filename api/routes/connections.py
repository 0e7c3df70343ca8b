"""
Provider connection endpoints.

List the latest connection checks and run new ones. Results are broadcast
on the audit feed.
"""
from fastapi import APIRouter, Depends, status
from typing import Any, Dict, List

from api.dependencies import get_connection_service
from core.application.services import ConnectionService


router = APIRouter()


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    summary="List provider connections",
)
async def list_connections(
    service: ConnectionService = Depends(get_connection_service),
) -> List[Dict[str, Any]]:
    return [connection.to_dict() for connection in await service.list_connections()]


@router.post(
    "/test-all",
    status_code=status.HTTP_200_OK,
    summary="Check every provider",
    description="Results are broadcast as `connections_tested`",
)
async def test_all(
    service: ConnectionService = Depends(get_connection_service),
) -> List[Dict[str, Any]]:
    return [connection.to_dict() for connection in await service.test_all()]


@router.post(
    "/{provider}/test",
    status_code=status.HTTP_200_OK,
    summary="Check one provider",
    description="The result is broadcast as `connection_tested`; unknown providers give 404",
)
async def test_connection(
    provider: str,
    service: ConnectionService = Depends(get_connection_service),
) -> Dict[str, Any]:
    connection = await service.test_connection(provider)
    return connection.to_dict()
