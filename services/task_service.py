"""
Task service.

Besides plain CRUD it keeps Task.assignedUser and User.pendingTasks in step:
creating, reassigning and deleting a task each update the affected users.
The writes run inside a transaction when the store is configured for it;
otherwise they run one after another and a failure part-way leaves the
references out of sync.
"""

from typing import Any, Callable, Dict, List, Optional, Union

from core.database import no_transaction
from core.exceptions import NotFoundError, ReferenceNotFoundError, ValidationFailedError
from core.logger import logger
from repositories.interfaces import ITaskRepository, IUserRepository
from repositories.models import (
    UNASSIGNED_USER,
    UNASSIGNED_USER_NAME,
    TaskInput,
    TaskModel,
)
from repositories.objectid_utils import is_valid_objectid
from services.interfaces import ITaskService
from services.query_params import ListQuery


class TaskService(ITaskService):
    """Service for managing tasks and their user assignment."""

    def __init__(
        self,
        task_repository: ITaskRepository,
        user_repository: IUserRepository,
        transaction: Optional[Callable] = None,
    ):
        self.tasks = task_repository
        self.users = user_repository
        self._transaction = transaction or no_transaction
        logger.debug("TaskService initialized")

    async def list_tasks(self, query: ListQuery) -> Union[int, List[Dict]]:
        if query.count:
            total = await self.tasks.count(query.where)
            logger.debug(f"Counted {total} tasks for filter {query.where}")
            return total

        tasks = await self.tasks.find(
            query.where,
            sort=query.sort,
            projection=query.select,
            skip=query.skip,
            limit=query.limit,
        )
        logger.debug(
            f"Listed {len(tasks)} tasks: skip={query.skip}, limit={query.limit}"
        )
        return tasks

    async def get_task(
        self, task_id: str, select: Optional[Dict[str, Any]] = None
    ) -> Dict:
        return await self._get_existing(task_id, select)

    async def create_task(self, payload: TaskInput) -> Dict:
        user = await self._resolve_user(payload.assigned_user)

        task = TaskModel(
            name=payload.name,
            description=payload.description,
            deadline=payload.deadline,
            completed=payload.completed,
            assigned_user=payload.assigned_user,
            assigned_user_name=user["name"] if user else UNASSIGNED_USER_NAME,
        )

        async with self._transaction() as session:
            created = await self.tasks.create(task, session=session)
            if user:
                await self.users.add_pending_task(
                    user["_id"], created["_id"], session=session
                )

        logger.info(
            f"Task created: id={created['_id']}, assignedUser={task.assigned_user or '-'}"
        )
        return created

    async def replace_task(self, task_id: str, payload: TaskInput) -> Dict:
        current = TaskModel.from_dict(await self._get_existing(task_id))

        old_user_id = current.assigned_user
        new_user_id = payload.assigned_user
        user = await self._resolve_user(new_user_id)

        # dateCreated is carried over from the stored task
        updated = current.model_copy(
            update={
                "name": payload.name,
                "description": payload.description,
                "deadline": payload.deadline,
                "completed": payload.completed,
                "assigned_user": new_user_id,
                "assigned_user_name": user["name"] if user else UNASSIGNED_USER_NAME,
            }
        )

        async with self._transaction() as session:
            if old_user_id != new_user_id:
                if current.is_assigned:
                    await self.users.remove_pending_task(
                        old_user_id, task_id, session=session
                    )
                if user:
                    await self.users.add_pending_task(
                        new_user_id, task_id, session=session
                    )
                logger.debug(
                    f"Task {task_id} moved from user '{old_user_id}' to '{new_user_id}'"
                )
            result = await self.tasks.replace(task_id, updated, session=session)

        logger.info(f"Task replaced: id={task_id}")
        return result

    async def delete_task(self, task_id: str) -> Dict:
        task = await self._get_existing(task_id)
        assigned_user = task.get("assignedUser") or UNASSIGNED_USER

        async with self._transaction() as session:
            if assigned_user != UNASSIGNED_USER:
                await self.users.remove_pending_task(
                    assigned_user, task_id, session=session
                )
            await self.tasks.delete_by_id(task_id, session=session)

        logger.info(f"Task deleted: id={task_id}")
        return task

    async def _get_existing(
        self, task_id: str, select: Optional[Dict[str, Any]] = None
    ) -> Dict:
        if not is_valid_objectid(task_id):
            raise ValidationFailedError("Invalid task ID")

        task = await self.tasks.find_by_id(task_id, projection=select)
        if task is None:
            logger.warning(f"Task not found: id={task_id}")
            raise NotFoundError("Task not found")
        return task

    async def _resolve_user(self, user_id: str) -> Optional[Dict]:
        """Look up the user a task is assigned to; None for unassigned."""
        if user_id == UNASSIGNED_USER:
            return None

        user = None
        if is_valid_objectid(user_id):
            user = await self.users.find_by_id(user_id)
        if user is None:
            logger.warning(f"Assigned user does not exist: {user_id}")
            raise ReferenceNotFoundError("Assigned user does not exist")
        return user
