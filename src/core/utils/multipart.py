"""Parsing of ``multipart/form-data`` request bodies from API Gateway events."""

from email import policy
from email.parser import BytesParser
from typing import Any

from aws_lambda_powertools import Logger
from pydantic import BaseModel, ConfigDict, Field

from core.models.errors import ValidationError
from core.utils.events import get_body_bytes, get_header

logger = Logger(UTC=True)


class UploadedFile(BaseModel):
    """One file part of a multipart form."""

    model_config = ConfigDict(frozen=True)

    field_name: str
    filename: str
    content_type: str | None = None
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


class MultipartForm(BaseModel):
    """Text fields and files of a multipart form, keyed by field name.

    Repeated fields keep every value in the order they were sent.
    """

    fields: dict[str, list[str]] = Field(default_factory=dict)
    files: dict[str, list[UploadedFile]] = Field(default_factory=dict)

    def get(self, name: str) -> str | None:
        values = self.fields.get(name)
        return values[0] if values else None

    def get_all(self, name: str) -> list[str]:
        return list(self.fields.get(name, []))

    def get_files(self, name: str) -> list[UploadedFile]:
        return list(self.files.get(name, []))

    def has(self, name: str) -> bool:
        return name in self.fields


def parse_multipart(event: dict[str, Any]) -> MultipartForm:
    """Parse the multipart body of an API Gateway proxy event.

    Raises:
        ValidationError: If the request is not a well-formed multipart form
    """
    content_type = get_header(event, "content-type")
    if not content_type or not content_type.lower().startswith("multipart/form-data"):
        raise ValidationError(message="Invalid request: expected multipart/form-data")

    body = get_body_bytes(event)
    if not body:
        raise ValidationError(message="Invalid request: empty multipart body")

    # The parser needs the boundary, which only the request header carries
    raw = (
        f"Content-Type: {content_type}\r\nMIME-Version: 1.0\r\n\r\n".encode("utf-8")
        + body
    )
    message = BytesParser(policy=policy.HTTP).parsebytes(raw)

    if not message.is_multipart():
        raise ValidationError(message="Invalid request: malformed multipart body")

    form = MultipartForm()

    for part in message.iter_parts():
        name = part.get_param("name", header="content-disposition")
        if not name:
            logger.debug("Skipping multipart part without a field name")
            continue

        payload = part.get_payload(decode=True) or b""
        filename = part.get_filename()

        if filename is not None:
            form.files.setdefault(name, []).append(
                UploadedFile(
                    field_name=name,
                    filename=filename,
                    content_type=part.get_content_type(),
                    content=payload,
                )
            )
            continue

        charset = part.get_content_charset() or "utf-8"
        form.fields.setdefault(name, []).append(payload.decode(charset))

    logger.debug(
        "Parsed multipart form",
        extra={
            "fields": sorted(form.fields),
            "files": {name: len(files) for name, files in form.files.items()},
        },
    )
    return form
