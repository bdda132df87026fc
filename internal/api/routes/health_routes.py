"""
Health Check API Routes.
"""

from fastapi import APIRouter, Depends

from core import get_settings
from core.database import MongoDB
from internal.api.dependencies import get_database
from internal.api.schemas import HealthResponse, StandardResponse
from internal.api.utils import success_response

router = APIRouter(tags=["Health"])


@router.get(
    "/",
    response_model=StandardResponse,
    summary="Root Endpoint",
    description="Get basic API information",
    operation_id="get_root",
)
async def root():
    """
    Root endpoint.

    Returns the service name, version and current status.
    """
    settings = get_settings()
    return success_response(
        message="API service is running",
        data={
            "service": settings.app_name,
            "version": settings.app_version,
            "status": "running",
        },
    )


@router.get(
    "/health",
    response_model=StandardResponse,
    summary="Health Check",
    description="Check service and database health",
    operation_id="health_check",
)
async def health_check(database: MongoDB = Depends(get_database)):
    """
    Health check endpoint.

    **Returns:**
    - Overall status (healthy / degraded)
    - Service name and version
    - MongoDB connectivity
    """
    settings = get_settings()
    db_healthy = await database.health_check()

    health_data = HealthResponse(
        status="healthy" if db_healthy else "degraded",
        service=settings.app_name,
        version=settings.app_version,
        database="connected" if db_healthy else "disconnected",
    )

    return success_response(
        message="Service is healthy" if db_healthy else "Service is degraded",
        data=health_data.model_dump(),
    )
