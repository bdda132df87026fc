"""
User service.

A user's pendingTasks is the other half of Task.assignedUser. Replacing a
user reassigns the tasks it gains and unassigns the tasks it drops; deleting
a user unassigns its incomplete tasks. Completed tasks keep pointing at a
deleted user.
"""

from typing import Any, Callable, Dict, List, Optional, Union

from core.database import no_transaction
from core.exceptions import NotFoundError, ReferenceNotFoundError, ValidationFailedError
from core.logger import logger
from repositories.interfaces import ITaskRepository, IUserRepository
from repositories.interfaces.document_repository_interface import Session
from repositories.models import UserInput, UserModel
from repositories.objectid_utils import is_valid_objectid
from services.interfaces import IUserService
from services.query_params import ListQuery


class UserService(IUserService):
    """Service for managing users and the tasks pending on them."""

    def __init__(
        self,
        user_repository: IUserRepository,
        task_repository: ITaskRepository,
        transaction: Optional[Callable] = None,
    ):
        self.users = user_repository
        self.tasks = task_repository
        self._transaction = transaction or no_transaction
        logger.debug("UserService initialized")

    async def list_users(self, query: ListQuery) -> Union[int, List[Dict]]:
        if query.count:
            return await self.users.count(query.where)

        users = await self.users.find(
            query.where,
            sort=query.sort,
            projection=query.select,
            skip=query.skip,
            limit=query.limit,
        )
        logger.debug(f"Listed {len(users)} users")
        return users

    async def get_user(
        self, user_id: str, select: Optional[Dict[str, Any]] = None
    ) -> Dict:
        return await self._get_existing(user_id, select)

    async def create_user(self, payload: UserInput) -> Dict:
        await self._ensure_tasks_exist(payload.pending_tasks)

        user = UserModel(
            name=payload.name,
            email=payload.email,
            pending_tasks=payload.pending_tasks,
        )

        async with self._transaction() as session:
            created = await self.users.create(user, session=session)
            if user.pending_tasks:
                await self._claim_tasks(
                    created["_id"], user.name, user.pending_tasks, session
                )

        logger.info(f"User created: id={created['_id']}, email={user.email}")
        return created

    async def replace_user(self, user_id: str, payload: UserInput) -> Dict:
        current = UserModel.from_dict(await self._get_existing(user_id))

        new_pending = payload.pending_tasks
        await self._ensure_tasks_exist(new_pending)

        keep = set(new_pending)
        removed = [task_id for task_id in current.pending_tasks if task_id not in keep]

        updated = current.model_copy(
            update={
                "name": payload.name,
                "email": payload.email,
                "pending_tasks": new_pending,
            }
        )

        async with self._transaction() as session:
            # Write the user first so a duplicate email fails before tasks change
            result = await self.users.replace(user_id, updated, session=session)
            if new_pending:
                await self._claim_tasks(user_id, payload.name, new_pending, session)
            if removed:
                unassigned = await self.tasks.unassign(removed, user_id, session=session)
                logger.debug(
                    f"User {user_id} dropped {len(removed)} tasks, {unassigned} unassigned"
                )

        logger.info(f"User replaced: id={user_id}")
        return result

    async def delete_user(self, user_id: str) -> Dict:
        user = await self._get_existing(user_id)

        async with self._transaction() as session:
            unassigned = await self.tasks.unassign_incomplete(user_id, session=session)
            await self.users.delete_by_id(user_id, session=session)

        logger.info(f"User deleted: id={user_id}, unassigned_tasks={unassigned}")
        return user

    async def _claim_tasks(
        self, user_id: str, user_name: str, task_ids: List[str], session: Session
    ) -> None:
        """Point task_ids at the user and take them off any previous owner."""
        await self.tasks.assign(task_ids, user_id, user_name, session=session)
        await self.users.release_tasks(task_ids, user_id, session=session)

    async def _ensure_tasks_exist(self, task_ids: List[str]) -> None:
        if not task_ids:
            return
        found = await self.tasks.find_by_ids(task_ids)
        if len(found) != len(task_ids):
            logger.warning(f"Unknown task ids in pendingTasks: {task_ids}")
            raise ReferenceNotFoundError(
                "One or more tasks in pendingTasks do not exist"
            )

    async def _get_existing(
        self, user_id: str, select: Optional[Dict[str, Any]] = None
    ) -> Dict:
        if not is_valid_objectid(user_id):
            raise ValidationFailedError("Invalid user ID")

        user = await self.users.find_by_id(user_id, projection=select)
        if user is None:
            logger.warning(f"User not found: id={user_id}")
            raise NotFoundError("User not found")
        return user
