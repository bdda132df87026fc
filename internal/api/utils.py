"""
API utility functions for response formatting.
"""

from typing import Any, Dict

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

SERVER_ERROR_MESSAGE = "Server Error"


def success_response(message: str = "Success", data: Any = None) -> Dict:
    """
    Create a success envelope.

    Args:
        message: Success message
        data: Response data (optional)

    Returns:
        Standard response dictionary
    """
    return {"message": message, "data": data}


def error_response(message: str, status_code: int) -> JSONResponse:
    """
    Create an error envelope with data set to null.

    Args:
        message: Error message
        status_code: HTTP status to respond with

    Returns:
        JSONResponse carrying the envelope
    """
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({"message": message, "data": None}),
    )
