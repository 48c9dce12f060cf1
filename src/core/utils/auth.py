"""API-key protection for admin handlers."""

from collections.abc import Callable
from functools import wraps
import hmac
import os
from typing import Any

from aws_lambda_powertools import Logger

from core.models.errors import UnauthorizedError
from core.utils.constants import API_KEY_HEADER, ENV_ADMIN_API_KEY
from core.utils.events import get_header

logger = Logger(UTC=True)

JsonDict = dict[str, Any]


def verify_admin_api_key(event: dict[str, Any]) -> None:
    """Check the ``x-api-key`` header against ``ADMIN_API_KEY``.

    Raises:
        UnauthorizedError: If the key is missing or does not match
    """
    api_key = get_header(event, API_KEY_HEADER)
    if not api_key:
        raise UnauthorizedError(message="Not authorized, no API key provided.")

    expected = os.getenv(ENV_ADMIN_API_KEY)
    if not expected:
        logger.error(f"{ENV_ADMIN_API_KEY} is not configured, rejecting admin request")
        raise UnauthorizedError(message="Not authorized, invalid API key.")

    if not hmac.compare_digest(api_key.encode("utf-8"), expected.encode("utf-8")):
        raise UnauthorizedError(message="Not authorized, invalid API key.")


def admin_api_key_required(
    func: Callable[..., JsonDict],
) -> Callable[..., JsonDict]:
    """Reject the request before the handler runs unless it carries the admin key."""

    @wraps(func)
    def wrapper(event: dict[str, Any], context: Any) -> JsonDict:
        verify_admin_api_key(event)
        return func(event, context)

    return wrapper
