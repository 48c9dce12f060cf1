"""
Lambda handler responsible for creating portfolio projects.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError as PydanticValidationError

from core.models.errors import DynamoDBError, S3Error, ValidationError
from core.models.project import ProjectResponse
from core.utils.auth import admin_api_key_required
from core.utils.constants import ERROR_CODE_THUMBNAIL_REQUIRED, METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler
from core.utils.events import request_context
from core.utils.multipart import parse_multipart
from core.utils.project_form import read_image_input, read_project_fields
from core.utils.response import ResponseBuilder
from core.utils.validators import sanitize_validation_errors, validate_request

from .models import CreateProjectRequest
from .service import CreateProjectService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
@admin_api_key_required
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle project creation requests.

    Expects a multipart/form-data body with the project text fields, a
    required ``thumbnail`` file and up to ten ``images`` files.

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response containing the created project
    """
    logger.info("Received create project request", extra=request_context(event, context))

    try:
        form = parse_multipart(event)
        request = validate_request(CreateProjectRequest, read_project_fields(form))
        image_input = read_image_input(form)

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

    if image_input.thumbnail is None:
        logger.warning("Project creation without thumbnail rejected")
        return ResponseBuilder.bad_request(
            "Thumbnail image is required",
            error=ERROR_CODE_THUMBNAIL_REQUIRED,
        )

    service = CreateProjectService()

    try:
        project = service.create_project(
            request,
            thumbnail=image_input.thumbnail,
            images=list(image_input.images),
        )

    except ValidationError as exc:
        logger.warning("Project creation rejected", extra={"error": exc.message})
        return ResponseBuilder.bad_request(
            exc.message,
            error=exc.error_code,
            details=exc.details,
        )

    except (S3Error, DynamoDBError) as exc:
        logger.exception("Infrastructure error during project creation")
        return ResponseBuilder.internal_error(exc.message, error=exc.error_code)

    metrics.add_metric(name="ProjectCreated", unit=MetricUnit.Count, value=1)

    response = ProjectResponse(message="Project created successfully", project=project)
    return ResponseBuilder.created(response.model_dump())
