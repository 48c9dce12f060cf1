"""Business logic for contact form submissions.

The message is stored first; the owner notification that follows is
best-effort and never fails the submission.
"""

import os

from aws_lambda_powertools import Logger

from core.infrastructure.aws.dynamodb_contact_messages import DynamoDBContactMessages
from core.infrastructure.aws.ses_notifier import SESOwnerNotifier
from core.models.contact import ContactMessage
from core.models.errors import NotificationError
from core.repositories.contact_repository import ContactMessageRepository, OwnerNotifier
from core.utils.constants import ENV_NOTIFICATION_SENDER_EMAIL, ENV_OWNER_EMAIL

from .models import ContactRequest

logger = Logger(UTC=True)


def default_notifier() -> OwnerNotifier | None:
    """Build the SES notifier, or None when no owner address is configured."""
    owner_email = os.getenv(ENV_OWNER_EMAIL)
    if not owner_email:
        return None

    return SESOwnerNotifier(
        owner_email=owner_email,
        sender_email=os.getenv(ENV_NOTIFICATION_SENDER_EMAIL),
    )


class ContactService:
    """Application service responsible for contact form submissions."""

    def __init__(
        self,
        repository: ContactMessageRepository | None = None,
        notifier: OwnerNotifier | None = None,
    ) -> None:
        self.repository = repository or DynamoDBContactMessages()
        self.notifier = notifier if notifier is not None else default_notifier()

    def submit(self, request: ContactRequest) -> ContactMessage:
        """Store a contact message and notify the owner.

        Raises:
            DynamoDBError: If the message cannot be stored
        """
        message = self.repository.create_message(
            name=request.name,
            email=request.email,
            subject=request.subject,
            message=request.message,
        )

        if self.notifier is None:
            logger.error(
                f"{ENV_OWNER_EMAIL} is not configured, owner was not notified",
                extra={"message_id": message.message_id},
            )
            return message

        try:
            self.notifier.notify_new_message(message)
        except NotificationError as exc:
            logger.error(
                "Owner notification failed, message was still stored",
                extra={"message_id": message.message_id, "error": exc.message},
            )

        return message
