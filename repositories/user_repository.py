"""
User repository for MongoDB operations.
"""

from typing import Dict, List

from pymongo.errors import DuplicateKeyError as MongoDuplicateKeyError

from core.database import MongoDB
from core.exceptions import DuplicateKeyError
from core.logger import logger
from repositories.base_repository import BaseRepository
from repositories.interfaces import IUserRepository
from repositories.interfaces.document_repository_interface import Session
from repositories.models import USERS_COLLECTION, UserModel
from repositories.objectid_utils import is_valid_objectid, str_to_objectid

EMAIL_EXISTS_MESSAGE = "Email already exists"


class UserRepository(BaseRepository, IUserRepository):
    """Repository for the users collection."""

    def __init__(self, database: MongoDB):
        super().__init__(database, USERS_COLLECTION)

    async def create(self, user: UserModel, session: Session = None) -> Dict:
        try:
            user_id = await self.insert(user.to_dict(), session=session)
        except MongoDuplicateKeyError:
            logger.warning(f"Duplicate email on create: {user.email}")
            raise DuplicateKeyError(EMAIL_EXISTS_MESSAGE)
        logger.info(f"User stored: id={user_id}, email={user.email}")
        return {"_id": user_id, **user.to_dict()}

    async def replace(
        self, user_id: str, user: UserModel, session: Session = None
    ) -> Dict:
        try:
            await self.replace_by_id(user_id, user.to_dict(), session=session)
        except MongoDuplicateKeyError:
            logger.warning(f"Duplicate email on replace: {user.email}")
            raise DuplicateKeyError(EMAIL_EXISTS_MESSAGE)
        return {"_id": user_id, **user.to_dict()}

    async def add_pending_task(
        self, user_id: str, task_id: str, session: Session = None
    ) -> bool:
        if not is_valid_objectid(user_id):
            return False
        result = await self.collection.update_one(
            {"_id": str_to_objectid(user_id)},
            {"$addToSet": {"pendingTasks": task_id}},
            session=session,
        )
        logger.debug(f"Added task {task_id} to pendingTasks of user {user_id}")
        return result.modified_count > 0

    async def remove_pending_task(
        self, user_id: str, task_id: str, session: Session = None
    ) -> bool:
        if not is_valid_objectid(user_id):
            return False
        result = await self.collection.update_one(
            {"_id": str_to_objectid(user_id)},
            {"$pull": {"pendingTasks": task_id}},
            session=session,
        )
        logger.debug(f"Removed task {task_id} from pendingTasks of user {user_id}")
        return result.modified_count > 0

    async def release_tasks(
        self, task_ids: List[str], new_owner_id: str, session: Session = None
    ) -> int:
        if not task_ids:
            return 0
        filter_dict = {"pendingTasks": {"$in": task_ids}}
        if is_valid_objectid(new_owner_id):
            filter_dict["_id"] = {"$ne": str_to_objectid(new_owner_id)}
        result = await self.collection.update_many(
            filter_dict,
            {"$pull": {"pendingTasks": {"$in": task_ids}}},
            session=session,
        )
        if result.modified_count:
            logger.debug(
                f"Released tasks {task_ids} from {result.modified_count} previous owners"
            )
        return result.modified_count
