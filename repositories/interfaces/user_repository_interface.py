"""
Interface for User Repository.
"""

from abc import abstractmethod
from typing import Dict, List

from repositories.interfaces.document_repository_interface import (
    IDocumentRepository,
    Session,
)
from repositories.models import UserModel


class IUserRepository(IDocumentRepository):
    """Interface for user repository operations."""

    @abstractmethod
    async def create(self, user: UserModel, session: Session = None) -> Dict:
        """
        Insert a new user.

        Raises:
            DuplicateKeyError: If the email is already taken
        """
        pass

    @abstractmethod
    async def replace(
        self, user_id: str, user: UserModel, session: Session = None
    ) -> Dict:
        """
        Overwrite every field of an existing user, keeping its _id.

        Raises:
            DuplicateKeyError: If the email is already taken
        """
        pass

    @abstractmethod
    async def add_pending_task(
        self, user_id: str, task_id: str, session: Session = None
    ) -> bool:
        """Add task_id to the user's pendingTasks unless already present."""
        pass

    @abstractmethod
    async def remove_pending_task(
        self, user_id: str, task_id: str, session: Session = None
    ) -> bool:
        """Remove task_id from the user's pendingTasks."""
        pass

    @abstractmethod
    async def release_tasks(
        self, task_ids: List[str], new_owner_id: str, session: Session = None
    ) -> int:
        """
        Remove task_ids from the pendingTasks of every user except new_owner_id.

        Returns:
            int: Number of users modified
        """
        pass
