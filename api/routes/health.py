"""
Health check endpoints.

Used for monitoring and load balancer health checks.
"""
from fastapi import APIRouter, Depends
import platform

from api.dependencies import get_run_controller
from core.utils.datetime import utc_now
from orchestration import RunController


router = APIRouter()


@router.get("/health")
async def health_check():
    """
    Health check endpoint.

    Returns system health status.
    """
    return {
        "status": "healthy",
        "timestamp": utc_now().isoformat(),
        "service": "astro-audit",
        "version": "1.0.0",
        "python_version": platform.python_version(),
    }


@router.get("/health/ready")
async def readiness_check(controller: RunController = Depends(get_run_controller)):
    """
    Readiness check endpoint.

    Reports the registered audit steps.
    """
    return {
        "status": "ready",
        "timestamp": utc_now().isoformat(),
        "checks": {
            "api": "ok",
            "steps": controller.registry.names,
        },
    }
