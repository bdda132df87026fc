"""
Service Dependencies.
Build services around the store handle opened by the application lifespan.
"""

from fastapi import Depends, Request

from core.database import MongoDB
from repositories import TaskRepository, UserRepository
from services import TaskService, UserService
from services.interfaces import ITaskService, IUserService


def get_database(request: Request) -> MongoDB:
    """Get the MongoDB handle stored on the application state."""
    return request.app.state.mongodb


def get_task_service(database: MongoDB = Depends(get_database)) -> ITaskService:
    """Get Task Service instance."""
    return TaskService(
        TaskRepository(database),
        UserRepository(database),
        transaction=database.transaction,
    )


def get_user_service(database: MongoDB = Depends(get_database)) -> IUserService:
    """Get User Service instance."""
    return UserService(
        UserRepository(database),
        TaskRepository(database),
        transaction=database.transaction,
    )


async def ensure_task_exists(
    task_id: str, task_service: ITaskService = Depends(get_task_service)
) -> None:
    """
    Reject unknown or malformed task ids before the request body is validated.

    Raises:
        ValidationFailedError: Invalid task ID (400)
        NotFoundError: Task not found (404)
    """
    await task_service.get_task(task_id, {"_id": 1})


async def ensure_user_exists(
    user_id: str, user_service: IUserService = Depends(get_user_service)
) -> None:
    """
    Reject unknown or malformed user ids before the request body is validated.

    Raises:
        ValidationFailedError: Invalid user ID (400)
        NotFoundError: User not found (404)
    """
    await user_service.get_user(user_id, {"_id": 1})
