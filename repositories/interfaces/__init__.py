"""
Repository Interfaces.
"""

from .document_repository_interface import IDocumentRepository
from .task_repository_interface import ITaskRepository
from .user_repository_interface import IUserRepository

__all__ = [
    "IDocumentRepository",
    "ITaskRepository",
    "IUserRepository",
]
