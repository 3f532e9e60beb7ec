"""
Lambda handler for cycle management: list, start, move and delete cycles.
"""
from typing import Any, Dict

from aws_lambda_powertools import Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from sensitrack.services.cycle_repository import CycleRepository
from sensitrack.services.exceptions import CycleNotFoundError, InvalidEntryError
from sensitrack.services.history import format_history
from sensitrack.utils.logging import logger, log_exception
from sensitrack.utils.responses import json_response, parse_body, parse_cycle_id

tracer = Tracer()


@logger.inject_lambda_context
@tracer.capture_lambda_handler
def handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Manage a user's cycles.

    GET lists cycles with their history lines, POST starts a new cycle at
    start_date, PUT moves cycle_id to start_date, DELETE removes cycle_id.

    Args:
        event: API Gateway Lambda proxy event
        context: Lambda context

    Returns:
        API Gateway Lambda proxy response
    """
    method = (event.get("httpMethod") or "GET").upper()
    try:
        body = parse_body(event)
    except ValueError as e:
        return json_response(400, {"error": f"Invalid request body: {str(e)}"})

    user_id = body.get("user_id")
    if not user_id:
        return json_response(400, {"error": "Missing user_id"})
    user_id = str(user_id)

    try:
        repository = CycleRepository()

        if method == "GET":
            cycles = repository.list_cycles(user_id)
            return json_response(200, {
                "cycles": [
                    {
                        "id": cycle.id,
                        "startDate": cycle.start_date,
                        "entryCount": len(cycle.entries),
                        "history": format_history(cycle)
                    }
                    for cycle in cycles
                ]
            })

        if method == "POST":
            cycle = repository.start_new_cycle(user_id, body.get("start_date"))
            return json_response(201, {"message": "Cycle started", "cycle_id": cycle.id})

        try:
            cycle_id = parse_cycle_id(body.get("cycle_id"))
        except ValueError as e:
            return json_response(400, {"error": str(e)})
        if cycle_id is None:
            return json_response(400, {"error": "Missing cycle_id"})

        if method == "PUT":
            repository.update_cycle_start_date(user_id, cycle_id, body.get("start_date"))
            return json_response(200, {"message": "Cycle updated"})

        if method == "DELETE":
            repository.delete_cycle(user_id, cycle_id)
            return json_response(200, {"message": "Cycle deleted"})

        return json_response(405, {"error": f"Method {method} not allowed"})

    except InvalidEntryError as e:
        return json_response(400, {"error": str(e)})
    except CycleNotFoundError as e:
        return json_response(404, {"error": str(e)})
    except Exception as e:
        log_exception(logger, "Error handling cycle request", e, method=method, user_id=user_id)
        return json_response(500, {"error": str(e)})
