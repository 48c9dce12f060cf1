"""Contact message model."""

from pydantic import BaseModel, Field, StrictStr


class ContactMessage(BaseModel):
    """A stored contact form submission."""

    message_id: StrictStr = Field(..., description="Unique message identifier")
    name: StrictStr
    email: StrictStr
    subject: StrictStr
    message: StrictStr
    created_at: StrictStr = Field(..., description="ISO-8601 creation timestamp (UTC)")
