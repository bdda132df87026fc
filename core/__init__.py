"""
Core module containing configuration, logging, errors and database access.
"""

from .config import Settings, get_settings
from .logger import logger
from .exceptions import (
    AppError,
    DuplicateKeyError,
    MalformedQueryError,
    NotFoundError,
    ReferenceNotFoundError,
    ValidationFailedError,
)

__all__ = [
    "Settings",
    "get_settings",
    "logger",
    "AppError",
    "DuplicateKeyError",
    "MalformedQueryError",
    "NotFoundError",
    "ReferenceNotFoundError",
    "ValidationFailedError",
]
