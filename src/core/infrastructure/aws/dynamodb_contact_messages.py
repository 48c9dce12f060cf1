"""DynamoDB-backed implementation of ContactMessageRepository."""

import uuid

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

from core.infrastructure.adapters.dynamodb_adapter import DynamoDBAdapter, DynamoDBAdapterProtocol
from core.models.contact import ContactMessage
from core.models.errors import DynamoDBError
from core.repositories.contact_repository import ContactMessageRepository
from core.utils.constants import (
    CONTACT_MESSAGE_ID_PREFIX,
    ENV_CONTACT_MESSAGES_TABLE_NAME,
    ERROR_CODE_CONTACT_CREATE_FAILED,
)
from core.utils.time import utc_now_iso

logger = Logger(UTC=True)


class DynamoDBContactMessages(ContactMessageRepository):
    """Stores contact form submissions in DynamoDB."""

    def __init__(self, adapter: DynamoDBAdapterProtocol | None = None) -> None:
        self._db: DynamoDBAdapterProtocol = adapter or DynamoDBAdapter(
            table_env=ENV_CONTACT_MESSAGES_TABLE_NAME
        )

    def create_message(
        self,
        *,
        name: str,
        email: str,
        subject: str,
        message: str,
    ) -> ContactMessage:
        contact_message = ContactMessage(
            message_id=f"{CONTACT_MESSAGE_ID_PREFIX}{uuid.uuid4().hex}",
            name=name,
            email=email,
            subject=subject,
            message=message,
            created_at=utc_now_iso(),
        )

        try:
            self._db.put_item(
                item=contact_message.model_dump(),
                condition_expression="attribute_not_exists(message_id)",
            )

        except ClientError as exc:
            logger.error(
                "DynamoDB put_item failed",
                extra={"message_id": contact_message.message_id},
            )
            raise DynamoDBError(
                message="Unable to save your message at this time",
                error_code=ERROR_CODE_CONTACT_CREATE_FAILED,
                details={"message_id": contact_message.message_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error saving contact message")
            raise DynamoDBError(
                message="Unable to save your message at this time",
                error_code=ERROR_CODE_CONTACT_CREATE_FAILED,
                details={"message_id": contact_message.message_id},
            ) from exc

        logger.info("Contact message stored", extra={"message_id": contact_message.message_id})
        return contact_message
