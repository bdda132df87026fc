"""
Parsing of list/get query parameters (where, sort, select, skip, limit, count).
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from bson import ObjectId
from pydantic import TypeAdapter, ValidationError
from pymongo import ASCENDING, DESCENDING

from core.exceptions import MalformedQueryError
from repositories.objectid_utils import is_valid_objectid

INVALID_JSON_MESSAGE = "Invalid JSON in query parameter"

# Fields stored as dates; string values in filters are parsed before querying
DATE_FIELDS = ("deadline", "dateCreated")

_SORT_DIRECTIONS = {
    1: ASCENDING,
    -1: DESCENDING,
    "1": ASCENDING,
    "-1": DESCENDING,
    "asc": ASCENDING,
    "ascending": ASCENDING,
    "desc": DESCENDING,
    "descending": DESCENDING,
}

_ID_LIST_OPERATORS = ("$in", "$nin")
_COMPARISON_OPERATORS = ("$eq", "$ne", "$gt", "$gte", "$lt", "$lte")

_datetime_adapter = TypeAdapter(datetime)


@dataclass
class ListQuery:
    """Parsed list request."""

    where: Dict[str, Any] = field(default_factory=dict)
    sort: List[Tuple[str, int]] = field(default_factory=list)
    select: Dict[str, Any] = field(default_factory=dict)
    skip: int = 0
    limit: int = 0
    count: bool = False


def parse_json_param(raw: Optional[str]) -> Any:
    """Decode a JSON-encoded query parameter. Empty values decode to None."""
    if not raw:
        return None
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        raise MalformedQueryError(INVALID_JSON_MESSAGE)


def parse_object_param(raw: Optional[str]) -> Dict[str, Any]:
    """Decode a query parameter that must be a JSON object."""
    value = parse_json_param(raw)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise MalformedQueryError(INVALID_JSON_MESSAGE)
    return value


def parse_int(raw: Optional[str], default: int) -> int:
    """Parse an integer; missing, non-numeric or zero values yield default."""
    if raw is None:
        return default
    try:
        value = int(str(raw).strip())
    except ValueError:
        return default
    return value or default


def parse_sort(raw: Optional[str]) -> List[Tuple[str, int]]:
    """Turn {"name": 1, "deadline": "desc"} into pymongo sort pairs."""
    directions = parse_object_param(raw)
    pairs = []
    for field_name, direction in directions.items():
        key = direction.lower() if isinstance(direction, str) else direction
        if isinstance(key, bool) or key not in _SORT_DIRECTIONS:
            raise MalformedQueryError(
                f"Invalid sort direction for field '{field_name}'"
            )
        pairs.append((field_name, _SORT_DIRECTIONS[key]))
    return pairs


def _cast_id(value: Any) -> Any:
    if isinstance(value, str) and is_valid_objectid(value):
        return ObjectId(value)
    return value


def _cast_date(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    try:
        return _datetime_adapter.validate_python(value)
    except ValidationError:
        return value


def _cast_value(value: Any, caster) -> Any:
    """Apply caster to a plain value or to the operands of an operator dict."""
    if isinstance(value, dict):
        cast = {}
        for op, operand in value.items():
            if op in _ID_LIST_OPERATORS and isinstance(operand, list):
                cast[op] = [caster(item) for item in operand]
            elif op in _COMPARISON_OPERATORS:
                cast[op] = caster(operand)
            else:
                cast[op] = operand
        return cast
    return caster(value)


def cast_filter(
    where: Dict[str, Any], date_fields: Iterable[str] = DATE_FIELDS
) -> Dict[str, Any]:
    """
    Convert JSON filter values to store types.

    _id strings become ObjectIds and date strings become datetimes, both
    at the top level and inside $and/$or/$nor branches.
    """
    cast = {}
    for key, value in where.items():
        if key in ("$and", "$or", "$nor") and isinstance(value, list):
            cast[key] = [
                cast_filter(branch, date_fields) if isinstance(branch, dict) else branch
                for branch in value
            ]
        elif key == "_id":
            cast[key] = _cast_value(value, _cast_id)
        elif key in date_fields:
            cast[key] = _cast_value(value, _cast_date)
        else:
            cast[key] = value
    return cast


def parse_list_query(
    where: Optional[str] = None,
    sort: Optional[str] = None,
    select: Optional[str] = None,
    skip: Optional[str] = None,
    limit: Optional[str] = None,
    count: Optional[str] = None,
    default_limit: int = 0,
) -> ListQuery:
    """
    Parse raw list query parameters.

    Raises:
        MalformedQueryError: If where/sort/select is not valid JSON
    """
    return ListQuery(
        where=cast_filter(parse_object_param(where)),
        sort=parse_sort(sort),
        select=parse_object_param(select),
        skip=max(parse_int(skip, 0), 0),
        limit=parse_int(limit, default_limit),
        count=count == "true",
    )
