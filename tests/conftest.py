"""
Pytest configuration and fixtures for portfolio API tests.
Provides AWS mocking, DynamoDB, S3 and SES fixtures plus in-memory fakes.
"""

import os

os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("IMAGE_S3_BUCKET_NAME", "portfolio-images-test")
os.environ.setdefault("PROJECTS_TABLE_NAME", "portfolio-projects-test")
os.environ.setdefault("CONTACT_MESSAGES_TABLE_NAME", "portfolio-contact-messages-test")
os.environ.setdefault("ADMIN_API_KEY", "test-api-key")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "1")
os.environ.setdefault("POWERTOOLS_METRICS_NAMESPACE", "PortfolioTest")

import base64  # noqa: E402
from collections.abc import Callable  # noqa: E402
import threading  # noqa: E402
import time  # noqa: E402
from types import SimpleNamespace  # noqa: E402
from typing import Any  # noqa: E402
import uuid  # noqa: E402

import boto3  # noqa: E402
import pytest  # noqa: E402
from moto import mock_aws  # noqa: E402

from core.models.errors import (  # noqa: E402
    DynamoDBError,
    ImageDeleteFailedError,
    ImageUploadFailedError,
)
from core.models.image import ImageRecord  # noqa: E402
from core.models.project import Project  # noqa: E402
from core.repositories.project_repository import ProjectRepository  # noqa: E402
from core.repositories.storage_repository import ImageStorageRepository  # noqa: E402

PNG_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk+M9QDwADhgGAWjR9awAAAABJRU5ErkJggg=="
)
JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00\xff\xd9"


def png(tag: str) -> bytes:
    """A distinct PNG payload; the tag keeps buffers apart in fakes."""
    return PNG_BYTES + tag.encode("utf-8")


class FakeImageStorage(ImageStorageRepository):
    """In-memory object store that records every call.

    Uploads whose bytes are in ``failing_uploads`` raise, uploads listed in
    ``upload_delays`` sleep first, deletes of ``failing_deletes`` raise and
    deletes listed in ``delete_delays`` sleep first.
    """

    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}
        self.upload_calls: list[bytes] = []
        self.delete_calls: list[str] = []
        self.failing_uploads: set[bytes] = set()
        self.upload_delays: dict[bytes, float] = {}
        self.failing_deletes: set[str] = set()
        self.delete_delays: dict[str, float] = {}
        self._lock = threading.Lock()

    def upload(self, *, file_data: bytes, folder: str) -> ImageRecord:
        delay = self.upload_delays.get(file_data)
        if delay:
            time.sleep(delay)

        with self._lock:
            self.upload_calls.append(file_data)

        if file_data in self.failing_uploads:
            raise ImageUploadFailedError(message="Unable to upload image at this time")

        key = f"{folder}/img_{uuid.uuid4().hex}.png"
        with self._lock:
            self.objects[key] = file_data
        return ImageRecord(url=f"https://cdn.example.com/{key}", id=key)

    def delete(self, *, image_id: str) -> None:
        delay = self.delete_delays.get(image_id)
        if delay:
            time.sleep(delay)

        with self._lock:
            self.delete_calls.append(image_id)

        if image_id in self.failing_deletes:
            raise ImageDeleteFailedError(message="Unable to delete image at this time")

        with self._lock:
            self.objects.pop(image_id, None)

    @property
    def store_calls(self) -> int:
        return len(self.upload_calls) + len(self.delete_calls)

    def seed(self, image_id: str, data: bytes = PNG_BYTES) -> ImageRecord:
        self.objects[image_id] = data
        return ImageRecord(url=f"https://cdn.example.com/{image_id}", id=image_id)


class InMemoryProjectRepository(ProjectRepository):
    """Dict-backed ProjectRepository with switchable write failures."""

    def __init__(self) -> None:
        self.projects: dict[str, Project] = {}
        self.fail_writes = False
        self.vanish_on_update = False
        self.update_calls: list[tuple[str, dict[str, Any]]] = []

    def find_all(self) -> list[Project]:
        projects = sorted(self.projects.values(), key=lambda p: p.created_at, reverse=True)
        return sorted(projects, key=lambda p: p.order)

    def find_by_id(self, project_id: str) -> Project | None:
        return self.projects.get(project_id)

    def create(self, fields: dict[str, Any]) -> Project:
        if self.fail_writes:
            raise DynamoDBError(message="Unable to save project at this time")

        project_id = f"proj_{uuid.uuid4().hex}"
        project = Project.model_validate(
            {
                **fields,
                "project_id": project_id,
                "created_at": "2024-01-01T00:00:00Z",
                "updated_at": "2024-01-01T00:00:00Z",
            }
        )
        self.projects[project_id] = project
        return project

    def update_fields(self, project_id: str, fields: dict[str, Any]) -> Project | None:
        self.update_calls.append((project_id, dict(fields)))

        if self.fail_writes:
            raise DynamoDBError(message="Unable to update project at this time")

        current = self.projects.get(project_id)
        if current is None or self.vanish_on_update:
            return None

        data = current.model_dump()
        for name, value in fields.items():
            if value is None:
                data.pop(name, None)
            elif isinstance(value, list):
                data[name] = [v.model_dump() if isinstance(v, ImageRecord) else v for v in value]
            elif isinstance(value, ImageRecord):
                data[name] = value.model_dump()
            else:
                data[name] = value
        data["updated_at"] = "2024-01-02T00:00:00Z"

        updated = Project.model_validate(data)
        self.projects[project_id] = updated
        return updated

    def delete_one(self, project_id: str) -> None:
        self.projects.pop(project_id, None)


@pytest.fixture
def fake_storage() -> FakeImageStorage:
    return FakeImageStorage()


@pytest.fixture
def project_repository() -> InMemoryProjectRepository:
    return InMemoryProjectRepository()


@pytest.fixture
def stored_project(
    project_repository: InMemoryProjectRepository,
    fake_storage: FakeImageStorage,
) -> Project:
    """A project with a thumbnail and two additional images already in the store."""
    thumbnail = fake_storage.seed("portfolio-projects/img_thumb.png")
    first = fake_storage.seed("portfolio-projects/img_a.png")
    second = fake_storage.seed("portfolio-projects/img_b.png")

    return project_repository.create(
        {
            "title": "Portfolio Site",
            "description": "A personal portfolio website",
            "technologies": ["React", "Python"],
            "category": "web",
            "order": 1,
            "thumbnail": thumbnail,
            "images": [first, second],
        }
    )


@pytest.fixture
def lambda_context():
    return SimpleNamespace(
        aws_request_id="test-request-id",
        function_name="test-function",
        memory_limit_in_mb=256,
        invoked_function_arn="arn:aws:lambda:us-east-1:000000000000:function:test",
        log_group_name="/aws/lambda/test-function",
        log_stream_name="2024/01/01/[$LATEST]test",
    )


@pytest.fixture
def multipart_event() -> Callable[..., dict[str, Any]]:
    """
    Build an API Gateway event with a multipart/form-data body.

    Usage:
        event = multipart_event(
            fields=[("title", "My project")],
            files=[("thumbnail", "thumb.png", png_bytes)],
        )

    With ``base64_encode=False`` the body is passed as UTF-8 text, the way
    API Gateway delivers non-binary payloads, so files must be text too.
    """

    def _build(
        *,
        fields: list[tuple[str, str]] | None = None,
        files: list[tuple[str, str, bytes]] | None = None,
        path_parameters: dict[str, str] | None = None,
        api_key: str | None = "test-api-key",
        base64_encode: bool = True,
    ) -> dict[str, Any]:
        boundary = "----portfolio-test-boundary"
        body = b""

        for name, value in fields or []:
            body += (
                f"--{boundary}\r\n"
                f'Content-Disposition: form-data; name="{name}"\r\n\r\n'
                f"{value}\r\n"
            ).encode("utf-8")

        for name, filename, content in files or []:
            body += (
                f"--{boundary}\r\n"
                f'Content-Disposition: form-data; name="{name}"; filename="{filename}"\r\n'
                "Content-Type: application/octet-stream\r\n\r\n"
            ).encode("utf-8")
            body += content + b"\r\n"

        body += f"--{boundary}--\r\n".encode("utf-8")

        headers = {"Content-Type": f"multipart/form-data; boundary={boundary}"}
        if api_key is not None:
            headers["x-api-key"] = api_key

        return {
            "httpMethod": "POST",
            "headers": headers,
            "pathParameters": path_parameters,
            "body": base64.b64encode(body).decode("ascii") if base64_encode else body.decode("utf-8"),
            "isBase64Encoded": base64_encode,
        }

    return _build


@pytest.fixture(scope="function")
def aws_mock():
    with mock_aws():
        yield


@pytest.fixture(scope="function")
def dynamodb_resource(aws_mock):
    return boto3.resource("dynamodb", region_name=os.getenv("AWS_REGION"))


def _create_table(dynamodb_resource, *, table_name: str, key: str):
    table = dynamodb_resource.create_table(
        TableName=table_name,
        BillingMode="PAY_PER_REQUEST",
        KeySchema=[{"AttributeName": key, "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": key, "AttributeType": "S"}],
    )
    table.wait_until_exists()
    return table


@pytest.fixture(scope="function")
def projects_table(dynamodb_resource):
    """Projects table keyed by project_id; moto discards it on context exit."""
    return _create_table(
        dynamodb_resource,
        table_name=os.environ["PROJECTS_TABLE_NAME"],
        key="project_id",
    )


@pytest.fixture(scope="function")
def contact_table(dynamodb_resource):
    return _create_table(
        dynamodb_resource,
        table_name=os.environ["CONTACT_MESSAGES_TABLE_NAME"],
        key="message_id",
    )


@pytest.fixture(scope="function")
def s3_client(aws_mock):
    """S3 client for bucket operations."""
    return boto3.client("s3", region_name=os.getenv("AWS_REGION"))


@pytest.fixture(scope="function")
def s3_bucket(s3_client):
    """Create the image bucket inside the moto context."""
    s3_client.create_bucket(Bucket=os.environ["IMAGE_S3_BUCKET_NAME"])
    return s3_client


@pytest.fixture
def s3_object_keys(s3_bucket) -> Callable[[], list[str]]:
    """
    List every key in the image bucket.

    Usage:
        assert s3_object_keys() == ["portfolio-projects/img_1.png"]
    """

    def _keys() -> list[str]:
        response = s3_bucket.list_objects_v2(Bucket=os.environ["IMAGE_S3_BUCKET_NAME"])
        return sorted(obj["Key"] for obj in response.get("Contents", []))

    return _keys


@pytest.fixture(scope="function")
def ses_client(aws_mock):
    """SES client with the test sender identity verified."""
    client = boto3.client("ses", region_name=os.getenv("AWS_REGION"))
    client.verify_email_identity(EmailAddress="owner@example.com")
    return client


@pytest.fixture
def make_png() -> Callable[[str], bytes]:
    return png
