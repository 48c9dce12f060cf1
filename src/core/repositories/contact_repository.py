"""Abstract contracts for contact form persistence and owner notification."""

from abc import ABC, abstractmethod

from core.models.contact import ContactMessage


class ContactMessageRepository(ABC):
    """Contract for storing contact form submissions."""

    @abstractmethod
    def create_message(
        self,
        *,
        name: str,
        email: str,
        subject: str,
        message: str,
    ) -> ContactMessage:
        """Persist a submission and return the stored message.

        Raises:
            DynamoDBError: If creation fails
        """


class OwnerNotifier(ABC):
    """Contract for telling the site owner about a new contact message."""

    @abstractmethod
    def notify_new_message(self, message: ContactMessage) -> None:
        """Send the notification.

        Raises:
            NotificationError: If the notification cannot be delivered
        """
