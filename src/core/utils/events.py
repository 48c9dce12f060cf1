"""Accessors for API Gateway REST proxy events."""

import base64
from typing import Any


def get_header(event: dict[str, Any], name: str) -> str | None:
    """Return a request header, matching the name case-insensitively."""
    headers = event.get("headers") or {}
    wanted = name.lower()

    for key, value in headers.items():
        if key.lower() == wanted:
            if isinstance(value, list):
                return str(value[0]) if value else None
            return value

    return None


def get_path_param(event: dict[str, Any], name: str) -> str | None:
    return (event.get("pathParameters") or {}).get(name)


def get_body_bytes(event: dict[str, Any]) -> bytes:
    """Return the raw request body, decoding base64 when API Gateway encoded it."""
    body = event.get("body")
    if body is None:
        return b""

    if event.get("isBase64Encoded"):
        return base64.b64decode(body)

    if isinstance(body, bytes):
        return body

    return str(body).encode("utf-8")


def request_context(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Structured fields describing an incoming request, for logging."""
    return {
        "http_method": event.get("httpMethod"),
        "path": event.get("path"),
        "query_params": event.get("queryStringParameters"),
        "request_id": getattr(context, "aws_request_id", None),
        "function_name": getattr(context, "function_name", None),
        "remaining_time_ms": context.get_remaining_time_in_millis()
        if hasattr(context, "get_remaining_time_in_millis")
        else None,
    }
