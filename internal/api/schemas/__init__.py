"""
API Schemas (Request/Response Models).
"""

from .common_schemas import (
    HealthResponse,
    StandardResponse,
)
from .task_schemas import TaskRequest
from .user_schemas import UserRequest

__all__ = [
    # Common schemas
    "StandardResponse",
    "HealthResponse",
    # Request bodies
    "TaskRequest",
    "UserRequest",
]
