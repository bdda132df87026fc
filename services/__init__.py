"""
Service layer implementing business logic.
Follows Service Layer Pattern and Single Responsibility Principle.
"""

from .task_service import TaskService
from .user_service import UserService

__all__ = [
    "TaskService",
    "UserService",
]
