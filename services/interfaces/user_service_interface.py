"""
Interface for User Service.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Union

from repositories.models import UserInput
from services.query_params import ListQuery


class IUserService(ABC):
    """Interface for user service operations."""

    @abstractmethod
    async def list_users(self, query: ListQuery) -> Union[int, List[Dict]]:
        """List users, or count them when query.count is set."""
        pass

    @abstractmethod
    async def get_user(
        self, user_id: str, select: Optional[Dict[str, Any]] = None
    ) -> Dict:
        """Get user by ID."""
        pass

    @abstractmethod
    async def create_user(self, payload: UserInput) -> Dict:
        """
        Create a user.

        Raises:
            DuplicateKeyError: If the email is already taken
            ReferenceNotFoundError: If a pendingTasks entry does not exist
        """
        pass

    @abstractmethod
    async def replace_user(self, user_id: str, payload: UserInput) -> Dict:
        """
        Overwrite a user and reconcile the assignment of its tasks.

        Raises:
            ValidationFailedError, NotFoundError, ReferenceNotFoundError,
            DuplicateKeyError
        """
        pass

    @abstractmethod
    async def delete_user(self, user_id: str) -> Dict:
        """
        Delete a user after unassigning its incomplete tasks.

        Returns:
            Dict: The deleted user
        """
        pass
