"""
Task repository for MongoDB operations.
"""

from typing import Dict, List

from core.database import MongoDB
from core.logger import logger
from repositories.base_repository import BaseRepository
from repositories.interfaces import ITaskRepository
from repositories.interfaces.document_repository_interface import Session
from repositories.models import (
    TASKS_COLLECTION,
    UNASSIGNED_USER,
    UNASSIGNED_USER_NAME,
    TaskModel,
)
from repositories.objectid_utils import to_objectids


class TaskRepository(BaseRepository, ITaskRepository):
    """Repository for the tasks collection."""

    def __init__(self, database: MongoDB):
        super().__init__(database, TASKS_COLLECTION)

    async def create(self, task: TaskModel, session: Session = None) -> Dict:
        task_id = await self.insert(task.to_dict(), session=session)
        logger.info(f"Task stored: id={task_id}, name={task.name}")
        return {"_id": task_id, **task.to_dict()}

    async def replace(
        self, task_id: str, task: TaskModel, session: Session = None
    ) -> Dict:
        await self.replace_by_id(task_id, task.to_dict(), session=session)
        return {"_id": task_id, **task.to_dict()}

    async def assign(
        self,
        task_ids: List[str],
        user_id: str,
        user_name: str,
        session: Session = None,
    ) -> int:
        object_ids = to_objectids(task_ids)
        if not object_ids:
            return 0
        result = await self.collection.update_many(
            {"_id": {"$in": object_ids}},
            {"$set": {"assignedUser": user_id, "assignedUserName": user_name}},
            session=session,
        )
        logger.debug(f"Assigned {result.modified_count} tasks to user {user_id}")
        return result.modified_count

    async def unassign(
        self, task_ids: List[str], user_id: str, session: Session = None
    ) -> int:
        object_ids = to_objectids(task_ids)
        if not object_ids:
            return 0
        result = await self.collection.update_many(
            {"_id": {"$in": object_ids}, "assignedUser": user_id},
            {
                "$set": {
                    "assignedUser": UNASSIGNED_USER,
                    "assignedUserName": UNASSIGNED_USER_NAME,
                }
            },
            session=session,
        )
        logger.debug(f"Unassigned {result.modified_count} tasks from user {user_id}")
        return result.modified_count

    async def unassign_incomplete(self, user_id: str, session: Session = None) -> int:
        result = await self.collection.update_many(
            {"assignedUser": user_id, "completed": False},
            {
                "$set": {
                    "assignedUser": UNASSIGNED_USER,
                    "assignedUserName": UNASSIGNED_USER_NAME,
                }
            },
            session=session,
        )
        logger.debug(
            f"Unassigned {result.modified_count} incomplete tasks from user {user_id}"
        )
        return result.modified_count
