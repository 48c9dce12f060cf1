from botocore.exceptions import ClientError
import pytest

from core.infrastructure.aws.ses_notifier import SESOwnerNotifier
from core.models.contact import ContactMessage
from core.models.errors import NotificationError


@pytest.fixture
def contact_message() -> ContactMessage:
    return ContactMessage(
        message_id="msg_1",
        name="<Ada>",
        email="ada@example.com",
        subject="Hello",
        message="Nice & tidy",
        created_at="2024-01-01T00:00:00Z",
    )


class RecordingSES:
    def __init__(self, exc: Exception | None = None) -> None:
        self.exc = exc
        self.sent: list[dict[str, str]] = []

    def send_html_email(self, **kwargs: str) -> str:
        if self.exc:
            raise self.exc
        self.sent.append(kwargs)
        return "ses-id"


def test_notify_sends_to_owner(contact_message) -> None:
    ses = RecordingSES()
    notifier = SESOwnerNotifier(owner_email="owner@example.com", adapter=ses)

    notifier.notify_new_message(contact_message)

    sent = ses.sent[0]
    assert sent["recipient"] == "owner@example.com"
    assert sent["sender"] == "owner@example.com"
    assert sent["subject"] == "New Contact Form Submission: Hello"
    assert "&lt;Ada&gt;" in sent["html"]
    assert "Nice &amp; tidy" in sent["html"]


def test_notify_failure_raises_notification_error(contact_message) -> None:
    ses = RecordingSES(ClientError({"Error": {"Code": "MessageRejected", "Message": "x"}}, "SendEmail"))
    notifier = SESOwnerNotifier(owner_email="owner@example.com", adapter=ses)

    with pytest.raises(NotificationError):
        notifier.notify_new_message(contact_message)


def test_notify_through_moto_ses(ses_client, contact_message) -> None:
    notifier = SESOwnerNotifier(owner_email="owner@example.com")

    notifier.notify_new_message(contact_message)

    quota = ses_client.get_send_quota()
    assert quota["SentLast24Hours"] == 1
