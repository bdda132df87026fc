"""
Application error taxonomy.
Each error carries the HTTP status the API layer responds with.
"""

from fastapi import status


class AppError(Exception):
    """Base class for errors reported to clients in the response envelope."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class MalformedQueryError(AppError):
    """Invalid JSON or shape in where/sort/select."""


class ValidationFailedError(AppError):
    """Missing required field, schema violation or invalid identifier."""


class ReferenceNotFoundError(AppError):
    """A referenced user or task does not exist."""


class DuplicateKeyError(AppError):
    """Unique index violation (user email)."""


class NotFoundError(AppError):
    """No record exists for the requested id."""

    status_code = status.HTTP_404_NOT_FOUND
