"""
Common API schemas shared across different endpoints.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class StandardResponse(BaseModel):
    """
    Standard API response format for all endpoints.

    - message: Success or error message
    - data: Response data, null on errors
    """

    message: str
    data: Optional[Any] = None

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "message": "Task retrieved successfully",
                    "data": {
                        "_id": "65a1f0c2e4b0a1b2c3d4e5f6",
                        "name": "Ship",
                        "description": "",
                        "deadline": "2024-01-01T00:00:00Z",
                        "completed": False,
                        "assignedUser": "",
                        "assignedUserName": "unassigned",
                        "dateCreated": "2023-12-01T10:00:00Z",
                    },
                },
                {"message": "Task not found", "data": None},
            ]
        }
    )


class HealthResponse(BaseModel):
    """Response model for health check (internal use)."""

    status: str
    service: str
    version: str
    database: str

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "status": "healthy",
                    "service": "Task Manager API",
                    "version": "1.0.0",
                    "database": "connected",
                }
            ]
        }
    )
