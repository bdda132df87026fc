"""
Utilities for MongoDB ObjectId conversion.
Handles conversion between ObjectId and string formats.
"""

from typing import Any, Dict, List, Optional, Union

from bson import ObjectId
from bson.errors import InvalidId


def is_valid_objectid(obj_id_str: Union[str, ObjectId, None]) -> bool:
    """
    Check if value is a valid ObjectId.

    Examples:
        >>> is_valid_objectid("507f1f77bcf86cd799439011")
        True
        >>> is_valid_objectid("invalid")
        False
        >>> is_valid_objectid(None)
        False
    """
    if isinstance(obj_id_str, ObjectId):
        return True
    if isinstance(obj_id_str, str):
        return ObjectId.is_valid(obj_id_str)
    return False


def str_to_objectid(obj_id_str: Union[str, ObjectId, None]) -> Optional[ObjectId]:
    """
    Convert string to ObjectId.

    Raises:
        ValueError: If string is not a valid ObjectId format
    """
    if obj_id_str is None:
        return None

    if isinstance(obj_id_str, ObjectId):
        return obj_id_str

    try:
        return ObjectId(obj_id_str)
    except (InvalidId, TypeError):
        raise ValueError(f"Invalid ObjectId string: {obj_id_str}")


def to_objectids(ids: List[str]) -> List[ObjectId]:
    """Convert the valid ids in a list, silently skipping malformed ones."""
    return [ObjectId(i) for i in ids if is_valid_objectid(i)]


def serialize_document(document: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Return a copy of a MongoDB document with _id as a string."""
    if document is None:
        return None
    result = dict(document)
    if isinstance(result.get("_id"), ObjectId):
        result["_id"] = str(result["_id"])
    return result
