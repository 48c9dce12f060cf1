"""
Lambda handler responsible for updating portfolio projects.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError as PydanticValidationError

from core.models.errors import DynamoDBError, NotFoundError, S3Error, ValidationError
from core.models.project import ProjectPathParams, ProjectResponse
from core.utils.auth import admin_api_key_required
from core.utils.constants import ERROR_CODE_INVALID_PROJECT_ID, METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler
from core.utils.events import get_path_param, request_context
from core.utils.multipart import parse_multipart
from core.utils.project_form import read_image_input, read_project_fields
from core.utils.response import ResponseBuilder
from core.utils.validators import sanitize_validation_errors, validate_request

from .models import UpdateProjectRequest
from .service import UpdateProjectService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
@admin_api_key_required
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle project update requests.

    Expects a multipart/form-data body. Every text field is optional; image
    changes are expressed with the ``thumbnail``/``images`` files and the
    ``clearThumbnail``, ``imagesToDelete`` and ``clearImages`` fields.

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response containing the updated project
    """
    logger.info("Received update project request", extra=request_context(event, context))

    try:
        path = validate_request(
            ProjectPathParams,
            {"project_id": get_path_param(event, "project_id")},
        )
    except PydanticValidationError as exc:
        logger.error("Invalid project id", extra={"errors": exc.errors()})
        return ResponseBuilder.bad_request(
            message="Invalid project id",
            error=ERROR_CODE_INVALID_PROJECT_ID,
            details={"errors": sanitize_validation_errors(exc.errors())},
        )

    try:
        form = parse_multipart(event)
        request = validate_request(UpdateProjectRequest, read_project_fields(form))
        image_input = read_image_input(form)
        UpdateProjectService.check_thumbnail_kept(image_input)

    except PydanticValidationError as exc:
        logger.error(
            "Request validation failed",
            extra={"errors": exc.errors()},
        )
        return ResponseBuilder.bad_request(
            message="Invalid request params",
            details={"errors": sanitize_validation_errors(exc.errors())},
        )

    except ValidationError as exc:
        logger.warning("Invalid project form", extra={"error": exc.message})
        return ResponseBuilder.bad_request(
            exc.message,
            error=exc.error_code,
            details=exc.details,
        )

    service = UpdateProjectService()

    try:
        project = service.update_project(path.project_id, request, image_input)

    except ValidationError as exc:
        logger.warning(
            "Project update rejected",
            extra={"project_id": path.project_id, "error": exc.message},
        )
        return ResponseBuilder.bad_request(
            exc.message,
            error=exc.error_code,
            details=exc.details,
        )

    except NotFoundError as exc:
        logger.info("Project not found for update", extra={"project_id": path.project_id})
        return ResponseBuilder.not_found(exc.message, error=exc.error_code)

    except (S3Error, DynamoDBError) as exc:
        logger.exception(
            "Infrastructure error during project update",
            extra={"project_id": path.project_id},
        )
        return ResponseBuilder.internal_error(exc.message, error=exc.error_code)

    metrics.add_metric(name="ProjectUpdated", unit=MetricUnit.Count, value=1)

    response = ProjectResponse(message="Project updated successfully", project=project)
    return ResponseBuilder.ok(response.model_dump())
