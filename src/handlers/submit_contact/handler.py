"""
Lambda handler responsible for contact form submissions.
"""

import json
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from core.models.errors import DynamoDBError
from core.utils.constants import METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler
from core.utils.events import get_body_bytes, request_context
from core.utils.response import ResponseBuilder
from core.utils.validators import sanitize_validation_errors, validate_request

from .models import ContactRequest, ContactResponse, ContactSummary
from .service import ContactService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle contact form submissions.

    Expected API Gateway event structure:
    {
        "body": "{\"name\": ..., \"email\": ..., \"subject\": ..., \"message\": ...}"
    }

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response acknowledging the message
    """
    logger.info("Received contact form submission", extra=request_context(event, context))

    try:
        body = json.loads(get_body_bytes(event) or b"{}")
    except json.JSONDecodeError as exc:
        logger.exception("Invalid JSON body received", exc_info=exc)
        return ResponseBuilder.bad_request(message="Invalid JSON body")

    if not isinstance(body, dict):
        return ResponseBuilder.bad_request(message="Invalid JSON body")

    try:
        request = validate_request(ContactRequest, body)
    except ValidationError as exc:
        logger.error(
            "Request validation failed",
            extra={"errors": exc.errors()},
        )
        return ResponseBuilder.bad_request(
            message="Invalid request params",
            details={"errors": sanitize_validation_errors(exc.errors())},
        )

    service = ContactService()

    try:
        message = service.submit(request)
    except DynamoDBError as exc:
        logger.exception("Contact message could not be stored")
        return ResponseBuilder.internal_error(exc.message, error=exc.error_code)

    metrics.add_metric(name="ContactMessageReceived", unit=MetricUnit.Count, value=1)

    response = ContactResponse(
        message="Message received successfully!",
        data=ContactSummary(
            id=message.message_id,
            name=message.name,
            email=message.email,
            subject=message.subject,
        ),
    )
    return ResponseBuilder.created(response.model_dump())
