"""
MongoDB document models using Pydantic.
Documents use camelCase keys on the wire and in the store; the Python
attributes are snake_case with aliases.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.database import TASKS_COLLECTION, USERS_COLLECTION

UNASSIGNED_USER = ""
UNASSIGNED_USER_NAME = "unassigned"

__all__ = [
    "TASKS_COLLECTION",
    "USERS_COLLECTION",
    "UNASSIGNED_USER",
    "UNASSIGNED_USER_NAME",
    "TaskInput",
    "TaskModel",
    "UserInput",
    "UserModel",
]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def unique_ids(ids: List[str]) -> List[str]:
    """Drop duplicate ids, keeping first-seen order."""
    seen = set()
    result = []
    for item in ids:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


class _Document(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(None, alias="_id", description="MongoDB _id as string")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for MongoDB, without the _id key."""
        return self.model_dump(by_alias=True, exclude={"id"})

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        """Create from a MongoDB document, converting ObjectId _id to str."""
        data = dict(data)
        if data.get("_id") is not None:
            data["_id"] = str(data["_id"])
        return cls.model_validate(data)


class TaskInput(BaseModel):
    """Validated body for creating or fully replacing a task."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, description="Task name")
    deadline: datetime = Field(..., description="Deadline (ISO date/datetime or epoch)")
    description: str = Field("", description="Free-form description")
    completed: bool = Field(False, description="Completion flag")
    assigned_user: str = Field(
        UNASSIGNED_USER, alias="assignedUser", description="User id or empty string"
    )
    assigned_user_name: Optional[str] = Field(
        None,
        alias="assignedUserName",
        description="Ignored when assigned, the user's name is used instead",
    )

    @field_validator("description", "assigned_user", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return "" if value is None else value

    @field_validator("completed", mode="before")
    @classmethod
    def _none_to_false(cls, value):
        return False if value is None else value

    @field_validator("deadline")
    @classmethod
    def _naive_to_utc(cls, value: datetime) -> datetime:
        # Date-only and offset-less deadlines are taken as UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class TaskModel(_Document):
    """Task document."""

    name: str
    description: str = ""
    deadline: datetime
    completed: bool = False
    assigned_user: str = Field(UNASSIGNED_USER, alias="assignedUser")
    assigned_user_name: str = Field(UNASSIGNED_USER_NAME, alias="assignedUserName")
    date_created: datetime = Field(default_factory=utc_now, alias="dateCreated")

    @property
    def is_assigned(self) -> bool:
        return self.assigned_user != UNASSIGNED_USER


class UserInput(BaseModel):
    """Validated body for creating or fully replacing a user."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, description="User name")
    email: str = Field(..., min_length=1, description="Unique email address")
    pending_tasks: List[str] = Field(
        default_factory=list, alias="pendingTasks", description="Task ids"
    )

    @field_validator("pending_tasks", mode="before")
    @classmethod
    def _none_to_list(cls, value):
        return [] if value is None else value

    @field_validator("pending_tasks")
    @classmethod
    def _dedupe(cls, value: List[str]) -> List[str]:
        return unique_ids(value)


class UserModel(_Document):
    """User document."""

    name: str
    email: str
    pending_tasks: List[str] = Field(default_factory=list, alias="pendingTasks")
    date_created: datetime = Field(default_factory=utc_now, alias="dateCreated")
