"""
FastAPI Service - Main entry point for the Task Manager API.
- Routes are separated into modules
- MongoDB for data persistence, opened at startup and closed at shutdown
- Every response uses the {message, data} envelope
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status as http_status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import get_settings
from core.database import MongoDB
from core.exceptions import AppError
from core.logger import logger
from internal.api.routes import health_router, task_router, user_router
from internal.api.schemas import TaskRequest, UserRequest
from internal.api.utils import SERVER_ERROR_MESSAGE, error_response

# Request bodies by route prefix, for the required-field message
_REQUEST_BODIES = {
    task_router.prefix: TaskRequest,
    user_router.prefix: UserRequest,
}
_REQUIRED_ERROR_TYPES = ("missing", "string_too_short")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan - startup and shutdown.
    Connects to MongoDB on startup and keeps the handle on app.state.
    """
    settings = get_settings()
    logger.info(
        f"========== Starting {settings.app_name} v{settings.app_version} API service =========="
    )
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"API: {settings.api_host}:{settings.api_port}")

    mongodb = MongoDB(settings)
    try:
        logger.info("Initializing MongoDB connection...")
        await mongodb.connect()
        await mongodb.create_indexes()

        if await mongodb.health_check():
            logger.info("MongoDB health check passed")
        else:
            logger.warning("MongoDB health check failed")
    except Exception as e:
        logger.error(f"Failed to initialize MongoDB: {e}")
        logger.exception("MongoDB initialization error details:")
        raise

    if settings.mongodb_use_transactions:
        logger.info("Reference updates run in MongoDB transactions")
    else:
        logger.info("Reference updates run without transactions")

    app.state.mongodb = mongodb
    logger.info(f"========== {settings.app_name} API service started ==========")

    yield

    logger.info("========== Shutting down API service ==========")
    await mongodb.disconnect()
    logger.info("========== API service stopped ==========")


def required_fields_message(path: str, errors: list) -> Optional[str]:
    """
    Message for a body missing one of its required fields, or None.

    Empty strings and nulls count as missing.
    """
    body = next(
        (schema for prefix, schema in _REQUEST_BODIES.items() if path.startswith(prefix)),
        None,
    )
    if body is None:
        return None

    for error in errors:
        loc = tuple(error.get("loc") or ())
        if len(loc) != 2 or loc[0] != "body" or loc[1] not in body.REQUIRED_FIELDS:
            continue
        if error.get("type") in _REQUIRED_ERROR_TYPES or error.get("input") is None:
            return body.REQUIRED_MESSAGE
    return None


def register_exception_handlers(app: FastAPI) -> None:
    """Map exceptions to the {message, data: null} envelope."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        logger.warning(
            f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}"
        )
        return error_response(exc.message, exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        errors = exc.errors()
        required_message = required_fields_message(request.url.path, errors)
        if required_message:
            logger.warning(f"Validation error: {required_message}")
            return error_response(required_message, http_status.HTTP_400_BAD_REQUEST)

        error_msg = "; ".join(
            f"{e['loc'][-1]}: {e['msg']}" if e.get("loc") else e["msg"] for e in errors
        )
        logger.warning(f"Validation error: {error_msg}")
        return error_response(
            f"Validation failed: {error_msg}", http_status.HTTP_400_BAD_REQUEST
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.warning(f"HTTP error: {exc.status_code} {exc.detail}")
        return error_response(str(exc.detail), exc.status_code)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}")
        logger.exception("Exception details:")
        return error_response(
            SERVER_ERROR_MESSAGE, http_status.HTTP_500_INTERNAL_SERVER_ERROR
        )


def create_app() -> FastAPI:
    """
    Factory function to create and configure the FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    logger.info("Creating FastAPI application...")
    settings = get_settings()

    description = """
## Task Manager API

CRUD API for tasks and users backed by MongoDB.

* A task's `assignedUser` and its user's `pendingTasks` are kept in step on every write
* List endpoints accept JSON-encoded `where`, `sort`, `select` plus `skip`, `limit`, `count`
* Every response is `{"message": ..., "data": ...}`
    """

    tags_metadata = [
        {"name": "Tasks", "description": "Task operations."},
        {"name": "Users", "description": "User operations."},
        {"name": "Health", "description": "Service and database health."},
    ]

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description=description,
        lifespan=lifespan,
        openapi_tags=tags_metadata,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.debug("CORS middleware added")

    app.include_router(task_router)
    app.include_router(user_router)
    app.include_router(health_router)
    logger.info("Task, user and health routes registered")

    register_exception_handlers(app)

    logger.info("FastAPI application created successfully")
    return app


app = create_app()


# Run with: uvicorn --app-dir cmd/api main:app --host 0.0.0.0 --port 3000
# (a top-level "cmd" package would collide with the standard library module)
if __name__ == "__main__":
    import os

    import uvicorn

    settings = get_settings()

    logger.info("========== Starting Uvicorn Server ==========")
    logger.info(f"Host: {settings.api_host}")
    logger.info(f"Port: {settings.api_port}")
    logger.info(f"Reload: {settings.api_reload}")

    if settings.api_reload:
        # The reload subprocess re-imports this module from its own directory
        # and needs the project root on PYTHONPATH for core/internal/services
        app_dir = os.path.dirname(os.path.abspath(__file__))
        project_root = os.path.dirname(os.path.dirname(app_dir))
        current_pythonpath = os.environ.get("PYTHONPATH", "")
        if project_root not in current_pythonpath.split(os.pathsep):
            os.environ["PYTHONPATH"] = (
                f"{project_root}{os.pathsep}{current_pythonpath}"
                if current_pythonpath
                else project_root
            )

        uvicorn.run(
            "main:app",
            app_dir=app_dir,
            host=settings.api_host,
            port=settings.api_port,
            reload=True,
            log_level="info" if settings.debug else "warning",
        )
    else:
        uvicorn.run(
            app,
            host=settings.api_host,
            port=settings.api_port,
            log_level="info" if settings.debug else "warning",
        )
