"""
Lambda handler responsible for standalone image uploads.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.models.errors import S3Error, ValidationError
from core.utils.auth import admin_api_key_required
from core.utils.constants import METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler
from core.utils.events import request_context
from core.utils.multipart import parse_multipart
from core.utils.response import ResponseBuilder

from .models import ImageUploadResponse
from .service import UploadService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)

IMAGE_FIELD = "image"


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
@admin_api_key_required
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image upload requests.

    Expects a multipart/form-data body with exactly one ``image`` file.

    Args:
        event: API Gateway Lambda proxy event containing the upload payload
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response describing the stored image
    """
    logger.info("Received image upload request", extra=request_context(event, context))

    try:
        form = parse_multipart(event)
    except ValidationError as exc:
        logger.warning("Invalid upload form", extra={"error": exc.message})
        return ResponseBuilder.bad_request(exc.message, error=exc.error_code)

    files = form.get_files(IMAGE_FIELD)
    if len(files) != 1:
        logger.warning("Upload must contain exactly one image", extra={"file_count": len(files)})
        return ResponseBuilder.bad_request(
            "Please upload exactly one file in the 'image' field",
        )

    upload = files[0]
    service = UploadService()

    try:
        record = service.upload_image(upload.content, file_name=upload.filename)

    except ValidationError as exc:
        logger.warning(
            "Uploaded file rejected",
            extra={"file_name": upload.filename, "error": exc.message},
        )
        return ResponseBuilder.bad_request(
            exc.message,
            error=exc.error_code,
            details=exc.details,
        )

    except S3Error as exc:
        logger.exception(
            "Infrastructure error during image upload",
            extra={"file_name": upload.filename},
        )
        return ResponseBuilder.internal_error(exc.message, error=exc.error_code)

    metrics.add_metric(name="ImageUploaded", unit=MetricUnit.Count, value=1)

    response = ImageUploadResponse(
        message="Image uploaded successfully",
        image_url=record.url,
        image_id=record.id,
        file_name=upload.filename,
        file_size=upload.size,
    )
    return ResponseBuilder.created(response.model_dump())
