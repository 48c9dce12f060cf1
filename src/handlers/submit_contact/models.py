"""Pydantic models for contact form submissions."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.utils.constants import (
    CONTACT_MESSAGE_MAX_LENGTH,
    CONTACT_NAME_MAX_LENGTH,
    CONTACT_SUBJECT_MAX_LENGTH,
    EMAIL_PATTERN,
)


class ContactRequest(BaseModel):
    """Validation model for a contact form submission."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=CONTACT_NAME_MAX_LENGTH)
    email: str = Field(..., min_length=1, pattern=EMAIL_PATTERN)
    subject: str = Field(..., min_length=1, max_length=CONTACT_SUBJECT_MAX_LENGTH)
    message: str = Field(..., min_length=1, max_length=CONTACT_MESSAGE_MAX_LENGTH)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower()


class ContactSummary(BaseModel):
    id: str
    name: str
    email: str
    subject: str


class ContactResponse(BaseModel):
    """Response model for an accepted contact message."""

    message: str = Field(..., description="Success message")
    data: ContactSummary
