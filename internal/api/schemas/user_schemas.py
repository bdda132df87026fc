"""
Pydantic schemas for the User API.
"""

from typing import ClassVar, Tuple

from pydantic import ConfigDict

from repositories.models import UserInput


class UserRequest(UserInput):
    """Request body for POST /api/users and PUT /api/users/{id}."""

    REQUIRED_FIELDS: ClassVar[Tuple[str, ...]] = ("name", "email")
    REQUIRED_MESSAGE: ClassVar[str] = "Name and email are required"

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {"name": "Ada", "email": "ada@example.com"},
                {
                    "name": "Ada",
                    "email": "ada@example.com",
                    "pendingTasks": ["65a1f0c2e4b0a1b2c3d4e5f6"],
                },
            ]
        },
    )
