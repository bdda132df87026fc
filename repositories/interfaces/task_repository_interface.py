"""
Interface for Task Repository.
Defines the contract that all task repositories must implement.
"""

from abc import abstractmethod
from typing import Dict, List

from repositories.interfaces.document_repository_interface import (
    IDocumentRepository,
    Session,
)
from repositories.models import TaskModel


class ITaskRepository(IDocumentRepository):
    """Interface for task repository operations."""

    @abstractmethod
    async def create(self, task: TaskModel, session: Session = None) -> Dict:
        """
        Insert a new task.

        Returns:
            Dict: Stored task with its generated _id
        """
        pass

    @abstractmethod
    async def replace(
        self, task_id: str, task: TaskModel, session: Session = None
    ) -> Dict:
        """Overwrite every field of an existing task, keeping its _id."""
        pass

    @abstractmethod
    async def assign(
        self,
        task_ids: List[str],
        user_id: str,
        user_name: str,
        session: Session = None,
    ) -> int:
        """
        Point tasks at a user.

        Returns:
            int: Number of tasks modified
        """
        pass

    @abstractmethod
    async def unassign(
        self, task_ids: List[str], user_id: str, session: Session = None
    ) -> int:
        """Unassign those of task_ids still assigned to user_id."""
        pass

    @abstractmethod
    async def unassign_incomplete(self, user_id: str, session: Session = None) -> int:
        """Unassign every incomplete task assigned to user_id."""
        pass
