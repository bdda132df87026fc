"""
Service interfaces (abstract base classes).
"""

from .task_service_interface import ITaskService
from .user_service_interface import IUserService

__all__ = [
    "ITaskService",
    "IUserService",
]
