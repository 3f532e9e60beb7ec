"""
Lambda handler for cycle analysis requests.
"""
from typing import Any, Dict

from aws_lambda_powertools import Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from sensitrack.models.analysis import AnalysisOptions
from sensitrack.services.chart_markers import build_chart_markers
from sensitrack.services.cycle import analyze_cycle
from sensitrack.services.cycle_repository import CycleRepository
from sensitrack.services.exceptions import CycleNotFoundError
from sensitrack.utils.logging import logger, log_exception
from sensitrack.utils.responses import json_response, parse_body, parse_cycle_id

tracer = Tracer()


@logger.inject_lambda_context
@tracer.capture_lambda_handler
def handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Analyze a stored cycle.

    Body:
        user_id: Owner of the cycle (required)
        cycle_id: Cycle to analyze, latest cycle when omitted
        allow_temp_only / allowTempOnly: Grant infertility on the thermal
            criterion alone
        peak_confirmation / peakConfirmation: "any" or "all"

    Args:
        event: API Gateway Lambda proxy event
        context: Lambda context

    Returns:
        API Gateway Lambda proxy response with cycle_id, analysis and markers
    """
    try:
        body = parse_body(event)
    except ValueError as e:
        return json_response(400, {"error": f"Invalid request body: {str(e)}"})

    user_id = body.get("user_id")
    if not user_id:
        return json_response(400, {"error": "Missing user_id"})

    try:
        options = AnalysisOptions.model_validate(
            {key: value for key, value in body.items() if value is not None}
        )
        cycle_id = parse_cycle_id(body.get("cycle_id"))
    except ValueError as e:
        return json_response(400, {"error": f"Invalid request: {str(e)}"})

    try:
        repository = CycleRepository()
        if cycle_id is None:
            cycle = repository.get_latest_cycle(str(user_id))
            if cycle is None:
                return json_response(404, {"error": "No cycles found"})
        else:
            cycle = repository.get_cycle(str(user_id), cycle_id)

        analysis = analyze_cycle(cycle, options)
        markers = build_chart_markers(cycle, analysis) if analysis else None

        logger.info("Analysis served", extra={
            "user_id": str(user_id),
            "cycle_id": cycle.id,
            "has_analysis": analysis is not None
        })

        return json_response(200, {
            "cycle_id": cycle.id,
            "analysis": analysis.model_dump(mode="json", by_alias=True) if analysis else None,
            "markers": markers.model_dump(mode="json", by_alias=True) if markers else None
        })

    except CycleNotFoundError as e:
        return json_response(404, {"error": str(e)})
    except Exception as e:
        log_exception(logger, "Error analyzing cycle", e, user_id=str(user_id))
        return json_response(500, {"error": str(e)})
