"""
Lambda handler responsible for reading a single portfolio project.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from core.models.errors import DynamoDBError, NotFoundError
from core.models.project import ProjectPathParams
from core.utils.constants import ERROR_CODE_INVALID_PROJECT_ID, METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler
from core.utils.events import get_path_param, request_context
from core.utils.response import ResponseBuilder
from core.utils.validators import sanitize_validation_errors, validate_request

from .service import GetProjectService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle project lookup requests.

    Args:
        event: API Gateway event payload.
        context: AWS Lambda runtime context.

    Returns:
        API Gateway-compatible response with the project document.
    """
    logger.info("Received get project request", extra=request_context(event, context))

    try:
        request = validate_request(
            ProjectPathParams,
            {"project_id": get_path_param(event, "project_id")},
        )
    except ValidationError as exc:
        logger.error(
            "Request validation failed",
            extra={"errors": exc.errors()},
        )
        return ResponseBuilder.bad_request(
            message="Invalid project id",
            error=ERROR_CODE_INVALID_PROJECT_ID,
            details={"errors": sanitize_validation_errors(exc.errors())},
        )

    service = GetProjectService()

    try:
        project = service.get_project(request.project_id)

    except NotFoundError as exc:
        logger.info("Project not found", extra={"project_id": request.project_id})
        return ResponseBuilder.not_found(exc.message, error=exc.error_code)

    except DynamoDBError as exc:
        logger.exception(
            "Get project failed",
            extra={"project_id": request.project_id},
        )
        return ResponseBuilder.internal_error(exc.message, error=exc.error_code)

    return ResponseBuilder.ok({"project": project.model_dump()})
