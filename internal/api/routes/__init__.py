"""
API Routes.
"""

from .health_routes import router as health_router
from .task_routes import router as task_router
from .user_routes import router as user_router

__all__ = [
    "health_router",
    "task_router",
    "user_router",
]
