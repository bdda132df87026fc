"""
Interface for Task Service.
Defines the contract that all task services must implement.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Union

from repositories.models import TaskInput
from services.query_params import ListQuery


class ITaskService(ABC):
    """Interface for task service operations."""

    @abstractmethod
    async def list_tasks(self, query: ListQuery) -> Union[int, List[Dict]]:
        """
        List tasks, or count them when query.count is set.

        Args:
            query: Parsed filter, sort, projection and pagination

        Returns:
            Union[int, List[Dict]]: Matching tasks, or their number
        """
        pass

    @abstractmethod
    async def get_task(
        self, task_id: str, select: Optional[Dict[str, Any]] = None
    ) -> Dict:
        """
        Get task by ID.

        Raises:
            ValidationFailedError: If task_id is not a valid id
            NotFoundError: If no task has this id
        """
        pass

    @abstractmethod
    async def create_task(self, payload: TaskInput) -> Dict:
        """
        Create a task and register it with its assigned user.

        Raises:
            ReferenceNotFoundError: If assignedUser does not exist
        """
        pass

    @abstractmethod
    async def replace_task(self, task_id: str, payload: TaskInput) -> Dict:
        """
        Overwrite a task, moving it between users' pendingTasks if needed.

        Raises:
            ValidationFailedError, NotFoundError, ReferenceNotFoundError
        """
        pass

    @abstractmethod
    async def delete_task(self, task_id: str) -> Dict:
        """
        Delete a task and drop it from its user's pendingTasks.

        Returns:
            Dict: The deleted task
        """
        pass
