"""SES-backed owner notifications for new contact messages."""

from html import escape

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

from core.infrastructure.adapters.ses_adapter import SESAdapter, SESAdapterProtocol
from core.models.contact import ContactMessage
from core.models.errors import NotificationError
from core.repositories.contact_repository import OwnerNotifier

logger = Logger(UTC=True)


class SESOwnerNotifier(OwnerNotifier):
    """Emails the site owner through SES."""

    def __init__(
        self,
        *,
        owner_email: str,
        sender_email: str | None = None,
        adapter: SESAdapterProtocol | None = None,
    ) -> None:
        self._owner_email = owner_email
        self._sender_email = sender_email or owner_email
        self._ses: SESAdapterProtocol = adapter or SESAdapter()

    def notify_new_message(self, message: ContactMessage) -> None:
        try:
            ses_message_id = self._ses.send_html_email(
                sender=self._sender_email,
                recipient=self._owner_email,
                subject=f"New Contact Form Submission: {message.subject}",
                html=self.render(message),
            )

        except ClientError as exc:
            logger.error(
                "SES send_email failed",
                extra={"message_id": message.message_id},
            )
            raise NotificationError(
                message="Failed to send email notification",
                details={"message_id": message.message_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error sending email notification")
            raise NotificationError(
                message="Failed to send email notification",
                details={"message_id": message.message_id},
            ) from exc

        logger.info(
            "Owner notified of contact message",
            extra={"message_id": message.message_id, "ses_message_id": ses_message_id},
        )

    @staticmethod
    def render(message: ContactMessage) -> str:
        return (
            "<h1>New Message from Portfolio Contact Form</h1>"
            f"<p><strong>Name:</strong> {escape(message.name)}</p>"
            f"<p><strong>Email:</strong> {escape(message.email)}</p>"
            f"<p><strong>Subject:</strong> {escape(message.subject)}</p>"
            "<p><strong>Message:</strong></p>"
            f"<p>{escape(message.message)}</p>"
            "<hr/>"
            f"<small>Received on: {escape(message.created_at)}</small>"
        )
