"""
User API Routes.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from core.config import Settings, get_settings
from core.logger import logger
from internal.api.dependencies import ensure_user_exists, get_user_service
from internal.api.schemas import StandardResponse, UserRequest
from internal.api.utils import success_response
from services.interfaces import IUserService
from services.query_params import parse_list_query, parse_object_param

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get(
    "",
    response_model=StandardResponse,
    summary="List Users",
    description="List users with JSON-encoded filter, sort and projection, or count them",
)
async def list_users(
    where: Optional[str] = Query(None, description="JSON filter"),
    sort: Optional[str] = Query(None, description="JSON sort"),
    select: Optional[str] = Query(None, description="JSON projection"),
    skip: Optional[str] = Query(None, description="Number of users to skip"),
    limit: Optional[str] = Query(None, description="Maximum number of users (default: all)"),
    count: Optional[str] = Query(None, description="'true' to return only the count"),
    user_service: IUserService = Depends(get_user_service),
    settings: Settings = Depends(get_settings),
):
    query = parse_list_query(
        where=where,
        sort=sort,
        select=select,
        skip=skip,
        limit=limit,
        count=count,
        default_limit=settings.users_default_limit,
    )
    logger.info(f"API: list users: where={query.where}, count={query.count}")

    result = await user_service.list_users(query)
    if query.count:
        return success_response(message="User count retrieved", data=result)
    return success_response(message="Users retrieved successfully", data=result)


@router.post(
    "",
    response_model=StandardResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create User",
    responses={400: {"description": "Validation failure or email already exists"}},
)
async def create_user(
    payload: UserRequest,
    user_service: IUserService = Depends(get_user_service),
):
    logger.info(f"API: create user: email={payload.email}")
    user = await user_service.create_user(payload)
    return success_response(message="User created successfully", data=user)


@router.get("/{user_id}", response_model=StandardResponse, summary="Get User")
async def get_user(
    user_id: str,
    select: Optional[str] = Query(None, description="JSON projection"),
    user_service: IUserService = Depends(get_user_service),
):
    user = await user_service.get_user(user_id, parse_object_param(select))
    return success_response(message="User retrieved successfully", data=user)


@router.put(
    "/{user_id}",
    response_model=StandardResponse,
    dependencies=[Depends(ensure_user_exists)],
    summary="Replace User",
    description=(
        "Overwrite a user. Tasks listed in pendingTasks are assigned to the user, "
        "tasks dropped from it are unassigned"
    ),
)
async def replace_user(
    user_id: str,
    payload: UserRequest,
    user_service: IUserService = Depends(get_user_service),
):
    logger.info(f"API: replace user: id={user_id}")
    user = await user_service.replace_user(user_id, payload)
    return success_response(message="User updated successfully", data=user)


@router.delete(
    "/{user_id}",
    response_model=StandardResponse,
    summary="Delete User",
    description="Delete a user and unassign its incomplete tasks",
)
async def delete_user(
    user_id: str,
    user_service: IUserService = Depends(get_user_service),
):
    logger.info(f"API: delete user: id={user_id}")
    user = await user_service.delete_user(user_id)
    return success_response(message="User deleted successfully", data=user)
