"""Thin adapter for sending email through Amazon SES."""

import os
from typing import Any, Protocol

import boto3
from botocore.config import Config

from core.utils.constants import (
    ENV_AWS_ENDPOINT_URL,
    ENV_AWS_REGION,
    STORE_CONNECT_TIMEOUT,
    STORE_MAX_ATTEMPTS,
    STORE_READ_TIMEOUT,
)


class SESAdapterProtocol(Protocol):
    """Minimal SES adapter protocol (notifier-facing)."""

    def send_html_email(
        self,
        *,
        sender: str,
        recipient: str,
        subject: str,
        html: str,
    ) -> str: ...


class SESAdapter:
    """Low-level SES operations (mechanical, no error handling)."""

    def __init__(self) -> None:
        self._client: Any = boto3.client(
            "ses",
            endpoint_url=os.getenv(ENV_AWS_ENDPOINT_URL),
            region_name=os.getenv(ENV_AWS_REGION),
            config=Config(
                connect_timeout=STORE_CONNECT_TIMEOUT,
                read_timeout=STORE_READ_TIMEOUT,
                retries={"max_attempts": STORE_MAX_ATTEMPTS},
            ),
        )

    def send_html_email(
        self,
        *,
        sender: str,
        recipient: str,
        subject: str,
        html: str,
    ) -> str:
        """Send one HTML email and return the SES message id.
        Raises boto3 exceptions - caught by domain implementation.
        """
        response = self._client.send_email(
            Source=sender,
            Destination={"ToAddresses": [recipient]},
            Message={
                "Subject": {"Data": subject, "Charset": "UTF-8"},
                "Body": {"Html": {"Data": html, "Charset": "UTF-8"}},
            },
        )
        return str(response.get("MessageId", ""))
