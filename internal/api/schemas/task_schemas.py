"""
Pydantic schemas for the Task API.
"""

from typing import ClassVar, Tuple

from pydantic import ConfigDict

from repositories.models import TaskInput


class TaskRequest(TaskInput):
    """Request body for POST /api/tasks and PUT /api/tasks/{id}."""

    REQUIRED_FIELDS: ClassVar[Tuple[str, ...]] = ("name", "deadline")
    REQUIRED_MESSAGE: ClassVar[str] = "Name and deadline are required"

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "name": "Ship",
                    "description": "Release the first version",
                    "deadline": "2024-01-01",
                    "completed": False,
                    "assignedUser": "65a1f0c2e4b0a1b2c3d4e5f6",
                },
                {"name": "Write docs", "deadline": "2024-02-15T17:00:00Z"},
            ]
        },
    )
