"""
Lambda handler for saving and deleting daily entries.
"""
from typing import Any, Dict

from aws_lambda_powertools import Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from sensitrack.services.cycle_repository import CycleRepository
from sensitrack.services.exceptions import CycleNotFoundError, InvalidEntryError
from sensitrack.utils.logging import logger, log_exception
from sensitrack.utils.responses import json_response, parse_body, parse_cycle_id

tracer = Tracer()


@logger.inject_lambda_context
@tracer.capture_lambda_handler
def handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Save (POST) or delete (DELETE) one day's observations.

    Body:
        user_id, cycle_id: Target cycle (required)
        entry: Entry fields for POST, date required
        date: Date to delete for DELETE

    Args:
        event: API Gateway Lambda proxy event
        context: Lambda context

    Returns:
        API Gateway Lambda proxy response
    """
    method = (event.get("httpMethod") or "POST").upper()
    try:
        body = parse_body(event)
    except ValueError as e:
        return json_response(400, {"error": f"Invalid request body: {str(e)}"})

    user_id = body.get("user_id")
    try:
        cycle_id = parse_cycle_id(body.get("cycle_id"))
    except ValueError as e:
        return json_response(400, {"error": str(e)})
    if not user_id or cycle_id is None:
        return json_response(400, {"error": "Missing user_id or cycle_id"})

    try:
        repository = CycleRepository()

        if method == "POST":
            entry = repository.upsert_entry(str(user_id), cycle_id, body.get("entry") or {})
            return json_response(200, {
                "message": "Entry saved",
                "entry": entry.model_dump(mode="json", by_alias=True)
            })

        if method == "DELETE":
            repository.delete_entry(str(user_id), cycle_id, body.get("date"))
            return json_response(200, {"message": "Entry deleted"})

        return json_response(405, {"error": f"Method {method} not allowed"})

    except InvalidEntryError as e:
        return json_response(400, {"error": str(e)})
    except CycleNotFoundError as e:
        return json_response(404, {"error": str(e)})
    except Exception as e:
        log_exception(logger, "Error handling entry request", e, method=method, user_id=str(user_id))
        return json_response(500, {"error": str(e)})
