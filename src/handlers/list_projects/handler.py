"""
Lambda handler responsible for listing portfolio projects.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.models.errors import DynamoDBError
from core.models.project import ListProjectsResponse
from core.utils.constants import METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler
from core.utils.events import request_context
from core.utils.response import ResponseBuilder

from .service import ListProjectsService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    List all projects, ordered by ``order`` ascending then newest first.

    Args:
        event: API Gateway event payload.
        context: AWS Lambda runtime context.

    Returns:
        API Gateway-compatible response with the projects.
    """
    logger.info("Received list projects request", extra=request_context(event, context))

    service = ListProjectsService()

    try:
        projects = service.list_projects()
    except DynamoDBError as exc:
        logger.exception("List projects failed")
        return ResponseBuilder.internal_error(exc.message, error=exc.error_code)

    response = ListProjectsResponse(projects=projects, total_count=len(projects))
    return ResponseBuilder.ok(response.model_dump())
