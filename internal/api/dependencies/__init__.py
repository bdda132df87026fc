"""
FastAPI dependencies.
"""

from .service_dependencies import (
    ensure_task_exists,
    ensure_user_exists,
    get_database,
    get_task_service,
    get_user_service,
)

__all__ = [
    "ensure_task_exists",
    "ensure_user_exists",
    "get_database",
    "get_task_service",
    "get_user_service",
]
