"""
Storefront environment endpoints.

Manage the storefront's environment variables, check that each provider
is fully configured and generate the storefront .env.example.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import Any, Dict, List, Optional
import logging

from api.dependencies import get_environment_service
from core.application.dtos import (
    CreateEnvironmentVarRequest,
    ExampleFileDTO,
    ServiceValidationDTO,
    UpdateEnvironmentVarRequest,
)
from core.application.services import EnvironmentService
from core.domain.exceptions import DuplicateRecordError, RecordNotFoundError


logger = logging.getLogger(__name__)
router = APIRouter()


@router.get(
    "/vars",
    status_code=status.HTTP_200_OK,
    summary="List environment variables",
)
async def list_vars(
    service: Optional[str] = Query(default=None, description="Only variables of this provider"),
    env: EnvironmentService = Depends(get_environment_service),
) -> List[Dict[str, Any]]:
    return [env_var.to_dict() for env_var in await env.list_vars(service)]


@router.post(
    "/vars",
    status_code=status.HTTP_200_OK,
    summary="Add an environment variable",
)
async def create_var(
    request: CreateEnvironmentVarRequest,
    env: EnvironmentService = Depends(get_environment_service),
) -> Dict[str, Any]:
    """
    Add a variable and write it to the storefront .env file.

    The owning provider is detected from the key when not given.
    """
    try:
        env_var = await env.create_var(request)
    except DuplicateRecordError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Environment variable {request.key} already exists",
        )
    return env_var.to_dict()


@router.put(
    "/vars/{var_id}",
    status_code=status.HTTP_200_OK,
    summary="Update an environment variable",
)
async def update_var(
    var_id: str,
    request: UpdateEnvironmentVarRequest,
    env: EnvironmentService = Depends(get_environment_service),
) -> Dict[str, Any]:
    try:
        env_var = await env.update_var(var_id, request)
    except RecordNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Environment variable not found")
    except DuplicateRecordError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return env_var.to_dict()


@router.delete(
    "/vars/{var_id}",
    status_code=status.HTTP_200_OK,
    summary="Delete an environment variable",
)
async def delete_var(
    var_id: str,
    env: EnvironmentService = Depends(get_environment_service),
) -> Dict[str, bool]:
    try:
        await env.delete_var(var_id)
    except RecordNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Environment variable not found")
    return {"success": True}


@router.post(
    "/import",
    status_code=status.HTTP_200_OK,
    summary="Import the storefront .env file",
    description="Bring variables already in the .env file under management",
)
async def import_env_file(
    env: EnvironmentService = Depends(get_environment_service),
) -> List[Dict[str, Any]]:
    return [env_var.to_dict() for env_var in await env.import_env_file()]


@router.get(
    "/services/{service}/validate",
    status_code=status.HTTP_200_OK,
    response_model=ServiceValidationDTO,
    summary="Validate a provider configuration",
)
async def validate_service(
    service: str,
    env: EnvironmentService = Depends(get_environment_service),
) -> ServiceValidationDTO:
    # unknown providers surface as 404 through the RecordNotFoundError handler
    return await env.validate_service(service)


@router.post(
    "/create-example",
    status_code=status.HTTP_200_OK,
    response_model=ExampleFileDTO,
    summary="Create the storefront .env.example",
)
async def create_example(
    overwrite: bool = Query(default=False, description="Replace an existing file"),
    env: EnvironmentService = Depends(get_environment_service),
) -> ExampleFileDTO:
    return await env.create_example_file(overwrite=overwrite)
