"""
API Gateway proxy response helpers.
"""
import json
from typing import Any, Dict, Optional


def parse_body(event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Get the JSON body of a Lambda proxy event as a dict.

    Raises:
        ValueError: If the body is not a JSON object
    """
    body = event.get("body") or {}
    if isinstance(body, str):
        body = json.loads(body)
    if not isinstance(body, dict):
        raise ValueError("Request body must be a JSON object")
    return body


def json_response(status_code: int, payload: Dict[str, Any]) -> Dict[str, Any]:
    """Build a Lambda proxy response with a JSON body."""
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(payload, default=str)
    }


def parse_cycle_id(value: Any) -> Optional[int]:
    """
    Read a cycle id from a request body value; None stays None.

    Raises:
        ValueError: If the value is not a positive whole number
    """
    if value is None:
        return None
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValueError(f"Invalid cycle_id: {value!r}")
    try:
        cycle_id = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid cycle_id: {value!r}")
    if cycle_id < 1:
        raise ValueError(f"Invalid cycle_id: {value!r}")
    return cycle_id
