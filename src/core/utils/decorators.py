"""
Exception-to-response mapping shared by every API Gateway handler.

Handlers deal with the errors they expect and return responses
themselves. Anything that escapes a handler is turned into a JSON error
response here, so a Lambda invocation never fails with a raw traceback.
"""

from __future__ import annotations

import traceback
from collections.abc import Callable
from functools import wraps
from http import HTTPStatus
from typing import Any, NamedTuple

from aws_lambda_powertools import Logger

from core.models.errors import (
    NotFoundError,
    PortfolioServiceError,
    UnauthorizedError,
    ValidationError,
)
from core.utils.response import ResponseBuilder

logger = Logger(service="api-gateway-handler", UTC=True)

JsonDict = dict[str, Any]

# Messages starting like this are already written for the caller
_FRIENDLY_PREFIXES = (
    "Invalid",
    "Missing",
    "Required",
    "Must",
    "Cannot",
    "Unable to",
    "Failed to",
    "Please",
    "Project",
    "Thumbnail",
    "Image",
    "File",
)

_GENERIC_SERVER_MESSAGE = (
    "We're experiencing technical difficulties. Please try again in a few moments."
)


class ErrorRoute(NamedTuple):
    """How one family of escaped exceptions is reported."""

    exceptions: tuple[type[BaseException], ...]
    status: HTTPStatus
    log_message: str
    server_side: bool = False


def client_message(exc: BaseException) -> str:
    """Message for a 4xx response: keep readable messages, hide technical ones."""
    if isinstance(exc, PortfolioServiceError):
        return exc.message

    text = str(exc)
    if text.startswith(_FRIENDLY_PREFIXES):
        return text

    if isinstance(exc, ValueError):
        return "The provided data is invalid. Please check your input and try again."
    if isinstance(exc, (KeyError, AttributeError)):
        return "A required field is missing. Please ensure all required fields are provided."
    if isinstance(exc, TypeError):
        return "The data format is incorrect. Please check the request format."
    return "We encountered an issue processing your request. Please try again."


# First match wins, so subclasses are listed before their bases
ERROR_ROUTES: tuple[ErrorRoute, ...] = (
    ErrorRoute((UnauthorizedError,), HTTPStatus.UNAUTHORIZED, "Unauthorized request"),
    ErrorRoute((NotFoundError,), HTTPStatus.NOT_FOUND, "Resource not found"),
    ErrorRoute((PermissionError,), HTTPStatus.FORBIDDEN, "Permission denied"),
    ErrorRoute(
        (ValidationError, ValueError, KeyError, TypeError, AttributeError),
        HTTPStatus.BAD_REQUEST,
        "Validation error in handler",
    ),
    ErrorRoute((TimeoutError,), HTTPStatus.GATEWAY_TIMEOUT, "Request timeout", True),
    ErrorRoute(
        (ConnectionError, OSError),
        HTTPStatus.SERVICE_UNAVAILABLE,
        "Connection error",
        True,
    ),
)

_SERVER_MESSAGES = {
    HTTPStatus.FORBIDDEN: "You don't have permission to perform this action.",
    HTTPStatus.GATEWAY_TIMEOUT: "The request took too long to process. Please try again.",
    HTTPStatus.SERVICE_UNAVAILABLE: "Unable to connect to required services. Please try again later.",
}

_FALLBACK_ROUTE = ErrorRoute(
    (Exception,), HTTPStatus.INTERNAL_SERVER_ERROR, "Unexpected error in handler", True
)


def route_for(exc: Exception) -> ErrorRoute:
    for route in ERROR_ROUTES:
        if isinstance(exc, route.exceptions):
            return route
    return _FALLBACK_ROUTE


def error_response(
    exc: Exception,
    *,
    handler_name: str,
    request_id: str | None,
    cors_origin: str | None = None,
) -> JsonDict:
    """Log an escaped exception and build the matching error response."""
    route = route_for(exc)

    log_extra = {
        "handler": handler_name,
        "request_id": request_id,
        "error": str(exc),
        "error_type": type(exc).__name__,
    }
    if route.server_side:
        logger.exception(route.log_message, extra=log_extra)
    else:
        log_extra["traceback"] = traceback.format_exc()
        logger.warning(route.log_message, extra=log_extra)

    if route.status in _SERVER_MESSAGES:
        message = _SERVER_MESSAGES[route.status]
    elif route.server_side:
        message = _GENERIC_SERVER_MESSAGE
    else:
        message = client_message(exc)

    error_code = (
        exc.error_code
        if isinstance(exc, PortfolioServiceError) and not route.server_side
        else None
    )

    return ResponseBuilder.error(
        status=route.status,
        message=message,
        error=error_code,
        request_id=request_id,
        cors_origin=cors_origin,
    )


def api_gateway_handler(
    func: Callable[..., JsonDict],
) -> Callable[..., JsonDict]:
    """
    Decorator for API Gateway Lambda handlers.

    Answers CORS preflight (OPTIONS) requests without calling the handler
    and converts any exception the handler lets escape into an error
    response according to ``ERROR_ROUTES``.

    Example:
        @api_gateway_handler
        def handler(event, context):
            return ResponseBuilder.ok({"status": "ok"})
    """

    @wraps(func)
    def wrapper(
        event: Any,
        context: Any,
        *,
        cors_origin: str | None = None,
    ) -> JsonDict:
        if event.get("httpMethod") == "OPTIONS":
            return ResponseBuilder.no_content(cors_origin=cors_origin)

        try:
            return func(event, context)
        except Exception as exc:
            return error_response(
                exc,
                handler_name=func.__name__,
                request_id=getattr(context, "aws_request_id", None),
                cors_origin=cors_origin,
            )

    return wrapper
