"""Request validation utilities."""

from typing import Any, TypeVar

from pydantic import BaseModel

from core.models.errors import ValidationError
from core.utils.constants import (
    ERROR_CODE_FILE_SIZE_EXCEEDED,
    ERROR_CODE_UNSUPPORTED_MIME_TYPE,
    FORM_TRUE_VALUE,
    MAX_FILE_SIZE,
    format_file_size,
    get_max_file_size_mb,
)
from core.utils.mime import is_supported_image

ModelT = TypeVar("ModelT", bound=BaseModel)


def sanitize_validation_errors(errors: list[Any]) -> list[dict[str, str]]:
    """Sanitize Pydantic validation errors for API responses.

    Removes sensitive/internal fields like:
    - url
    - ctx
    - input
    - internal exception details
    """
    sanitized: list[dict[str, str]] = []

    for err in errors:
        field = ".".join(str(x) for x in err.get("loc", [])) or "body"
        raw_msg = err.get("msg", "Invalid value")

        # Remove noisy prefixes
        msg = raw_msg.replace("Value error,", "").strip()

        # Friendly rewrites for common cases
        msg_lower = msg.lower()
        if "field required" in msg_lower:
            msg = "This field is required"
        elif "string should match pattern" in msg_lower:
            msg = "Invalid format"
        elif "input should be a valid" in msg_lower and "type" in err.get("type", ""):
            msg = "Invalid value type"

        sanitized.append(
            {
                "field": field,
                "message": msg,
            }
        )

    return sanitized


def validate_request(model: type[ModelT], data: dict[str, Any]) -> ModelT:
    """Validate request data against a Pydantic model.

    Raises:
        pydantic.ValidationError: If the data does not satisfy the model
    """
    return model.model_validate(data)


def parse_bool_flag(value: Any) -> bool:
    """Interpret a form flag; only the literal string "true" (any case) is set."""
    if isinstance(value, bool):
        return value
    return isinstance(value, str) and value.strip().lower() == FORM_TRUE_VALUE


def split_list_field(value: Any) -> list[str]:
    """Normalize a csv string or repeated form values into trimmed, non-empty strings."""
    if value is None:
        return []

    if isinstance(value, str):
        raw = value.split(",")
    elif isinstance(value, (list, tuple)):
        raw = [part for item in value for part in str(item).split(",")]
    else:
        raise ValueError("Expected a string or list of strings")

    return [item.strip() for item in raw if item.strip()]


def validate_image_bytes(file_data: bytes, *, field: str) -> bytes:
    """Check that uploaded bytes are a supported image within the size limit.

    Raises:
        ValidationError: If the file is empty, too large or not a supported image
    """
    if not file_data:
        raise ValidationError(
            message=f"File '{field}' is empty",
            details={"field": field},
        )

    if len(file_data) > MAX_FILE_SIZE:
        raise ValidationError(
            message=f"File '{field}' exceeds the {get_max_file_size_mb()}MB limit",
            error_code=ERROR_CODE_FILE_SIZE_EXCEEDED,
            details={"field": field, "file_size": format_file_size(len(file_data))},
        )

    if not is_supported_image(file_data):
        raise ValidationError(
            message=f"File '{field}' is not a supported image (jpeg, png, gif, webp)",
            error_code=ERROR_CODE_UNSUPPORTED_MIME_TYPE,
            details={"field": field},
        )

    return file_data
