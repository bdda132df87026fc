"""
Task API Routes.
Application errors propagate to the handlers registered in the app factory.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from core.config import Settings, get_settings
from core.logger import logger
from internal.api.dependencies import ensure_task_exists, get_task_service
from internal.api.schemas import StandardResponse, TaskRequest
from internal.api.utils import success_response
from services.interfaces import ITaskService
from services.query_params import parse_list_query, parse_object_param

router = APIRouter(prefix="/api/tasks", tags=["Tasks"])

_ERROR_RESPONSES = {
    400: {"description": "Malformed query, validation failure or unknown user"},
    500: {"description": "Internal server error"},
}


@router.get(
    "",
    response_model=StandardResponse,
    summary="List Tasks",
    description="List tasks with JSON-encoded filter, sort and projection, or count them",
    responses=_ERROR_RESPONSES,
)
async def list_tasks(
    where: Optional[str] = Query(None, description='JSON filter, e.g. {"completed": false}'),
    sort: Optional[str] = Query(None, description='JSON sort, e.g. {"deadline": 1}'),
    select: Optional[str] = Query(None, description='JSON projection, e.g. {"name": 1}'),
    skip: Optional[str] = Query(None, description="Number of tasks to skip"),
    limit: Optional[str] = Query(None, description="Maximum number of tasks (default 100)"),
    count: Optional[str] = Query(None, description="'true' to return only the count"),
    task_service: ITaskService = Depends(get_task_service),
    settings: Settings = Depends(get_settings),
):
    """
    List tasks.

    **Query parameters** (`where`, `sort`, `select` are JSON-encoded):
    - **where**: filter document
    - **sort**: field to direction map (1/-1, asc/desc)
    - **select**: field selection mask
    - **skip**, **limit**: pagination, limit defaults to 100
    - **count**: `true` returns the number of matching tasks instead of the tasks
    """
    query = parse_list_query(
        where=where,
        sort=sort,
        select=select,
        skip=skip,
        limit=limit,
        count=count,
        default_limit=settings.tasks_default_limit,
    )
    logger.info(f"API: list tasks: where={query.where}, count={query.count}")

    result = await task_service.list_tasks(query)
    if query.count:
        return success_response(message="Task count retrieved", data=result)
    return success_response(message="Tasks retrieved successfully", data=result)


@router.post(
    "",
    response_model=StandardResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Task",
    description="Create a task and add it to its assigned user's pendingTasks",
    responses=_ERROR_RESPONSES,
)
async def create_task(
    payload: TaskRequest,
    task_service: ITaskService = Depends(get_task_service),
):
    logger.info(f"API: create task: name={payload.name}")
    task = await task_service.create_task(payload)
    return success_response(message="Task created successfully", data=task)


@router.get(
    "/{task_id}",
    response_model=StandardResponse,
    summary="Get Task",
    responses={404: {"description": "Task not found"}, **_ERROR_RESPONSES},
)
async def get_task(
    task_id: str,
    select: Optional[str] = Query(None, description="JSON projection"),
    task_service: ITaskService = Depends(get_task_service),
):
    task = await task_service.get_task(task_id, parse_object_param(select))
    return success_response(message="Task retrieved successfully", data=task)


@router.put(
    "/{task_id}",
    response_model=StandardResponse,
    dependencies=[Depends(ensure_task_exists)],
    summary="Replace Task",
    description="Overwrite a task; dateCreated is preserved",
    responses={404: {"description": "Task not found"}, **_ERROR_RESPONSES},
)
async def replace_task(
    task_id: str,
    payload: TaskRequest,
    task_service: ITaskService = Depends(get_task_service),
):
    logger.info(f"API: replace task: id={task_id}")
    task = await task_service.replace_task(task_id, payload)
    return success_response(message="Task updated successfully", data=task)


@router.delete(
    "/{task_id}",
    response_model=StandardResponse,
    summary="Delete Task",
    responses={404: {"description": "Task not found"}, **_ERROR_RESPONSES},
)
async def delete_task(
    task_id: str,
    task_service: ITaskService = Depends(get_task_service),
):
    logger.info(f"API: delete task: id={task_id}")
    task = await task_service.delete_task(task_id)
    return success_response(message="Task deleted successfully", data=task)
