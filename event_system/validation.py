"""
Request-boundary helpers shared by the route modules.
"""

from typing import Any, Dict

from flask import request

from event_system.errors import ValidationError


def json_body() -> Dict[str, Any]:
    """
    Return the parsed JSON object of the current request.

    Raises:
        ValidationError: Body missing, not JSON, or not an object.
    """
    data = request.get_json(silent=True)
    if data is None:
        raise ValidationError("Invalid request body")
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def string_field(data: Dict[str, Any], key: str) -> str:
    """Fetch an optional string field, '' when absent or null."""
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    return value
