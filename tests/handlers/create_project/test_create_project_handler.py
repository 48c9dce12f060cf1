import json
from unittest.mock import patch

import pytest

from core.models.errors import DynamoDBError, ImageUploadFailedError
from handlers.create_project.handler import handler

VALID_FIELDS = [
    ("title", "Portfolio Site"),
    ("description", "A personal portfolio website"),
    ("technologies", "React, Python"),
    ("category", "web"),
    ("order", "1"),
    ("githubLink", "https://github.com/owner/portfolio"),
    ("liveLink", ""),
]


def parse_body(response):
    return json.loads(response["body"])


class TestCreateProjectHandler:
    def test_create_success(
        self,
        multipart_event,
        make_png,
        lambda_context,
        projects_table,
        s3_bucket,
        s3_object_keys,
    ) -> None:
        event = multipart_event(
            fields=VALID_FIELDS,
            files=[
                ("thumbnail", "thumb.png", make_png("thumb")),
                ("images", "one.png", make_png("one")),
                ("images", "two.png", make_png("two")),
            ],
        )

        response = handler(event, lambda_context)

        assert response["statusCode"] == 201
        body = parse_body(response)
        project = body["project"]

        assert body["message"] == "Project created successfully"
        assert project["technologies"] == ["React", "Python"]
        assert project["order"] == 1
        assert project["live_link"] is None
        assert len(project["images"]) == 2

        stored_keys = s3_object_keys()
        assert project["thumbnail"]["id"] in stored_keys
        assert len(stored_keys) == 3

        item = projects_table.get_item(Key={"project_id": project["project_id"]})["Item"]
        assert item["thumbnail"]["id"] == project["thumbnail"]["id"]
        assert [image["id"] for image in item["images"]] == [
            image["id"] for image in project["images"]
        ]

    def test_missing_api_key(self, multipart_event, lambda_context) -> None:
        with patch("handlers.create_project.handler.CreateProjectService") as service:
            response = handler(multipart_event(fields=VALID_FIELDS, api_key=None), lambda_context)

        assert response["statusCode"] == 401
        assert parse_body(response)["message"] == "Not authorized, no API key provided."
        service.assert_not_called()

    def test_wrong_api_key(self, multipart_event, lambda_context) -> None:
        response = handler(multipart_event(fields=VALID_FIELDS, api_key="wrong"), lambda_context)

        assert response["statusCode"] == 401
        assert parse_body(response)["message"] == "Not authorized, invalid API key."

    def test_missing_thumbnail_rejected_before_store_calls(
        self, multipart_event, lambda_context
    ) -> None:
        with patch("handlers.create_project.handler.CreateProjectService") as service:
            response = handler(multipart_event(fields=VALID_FIELDS), lambda_context)

        assert response["statusCode"] == 400
        assert parse_body(response)["error"] == "THUMBNAIL_REQUIRED"
        service.assert_not_called()

    @pytest.mark.parametrize(
        "field,value",
        [("title", "ab"), ("category", "desktop"), ("order", "-1"), ("technologies", " , ")],
    )
    def test_invalid_fields(self, field, value, multipart_event, make_png, lambda_context) -> None:
        fields = [(name, value if name == field else v) for name, v in VALID_FIELDS]
        event = multipart_event(fields=fields, files=[("thumbnail", "t.png", make_png("t"))])

        with patch("handlers.create_project.handler.CreateProjectService") as service:
            response = handler(event, lambda_context)

        assert response["statusCode"] == 400
        body = parse_body(response)
        assert body["message"] == "Invalid request params"
        assert body["details"]["errors"][0]["field"] == field
        service.assert_not_called()

    def test_non_image_thumbnail(self, multipart_event, lambda_context) -> None:
        event = multipart_event(fields=VALID_FIELDS, files=[("thumbnail", "t.pdf", b"%PDF-1.7")])

        response = handler(event, lambda_context)

        assert response["statusCode"] == 400
        assert parse_body(response)["error"] == "UNSUPPORTED_MIME_TYPE"

    def test_json_body_rejected(self, lambda_context) -> None:
        event = {
            "httpMethod": "POST",
            "headers": {"Content-Type": "application/json", "x-api-key": "test-api-key"},
            "body": "{}",
        }

        response = handler(event, lambda_context)

        assert response["statusCode"] == 400

    @pytest.mark.parametrize(
        "error",
        [
            ImageUploadFailedError(message="Unable to upload image at this time"),
            DynamoDBError(message="Unable to save project at this time", error_code="PROJECT_CREATE_FAILED"),
        ],
    )
    def test_infrastructure_errors(self, error, multipart_event, make_png, lambda_context) -> None:
        event = multipart_event(fields=VALID_FIELDS, files=[("thumbnail", "t.png", make_png("t"))])

        with patch(
            "handlers.create_project.handler.CreateProjectService.create_project",
            side_effect=error,
        ), patch("handlers.create_project.service.DynamoDBProjects"), patch(
            "handlers.create_project.service.S3ImageStorage"
        ):
            response = handler(event, lambda_context)

        assert response["statusCode"] == 500
        assert parse_body(response)["error"] == error.error_code

    def test_thumbnail_failure_leaves_nothing_behind(
        self,
        multipart_event,
        make_png,
        lambda_context,
        projects_table,
        s3_bucket,
        s3_object_keys,
    ) -> None:
        event = multipart_event(fields=VALID_FIELDS, files=[("thumbnail", "t.png", make_png("t"))])

        with patch(
            "core.infrastructure.adapters.s3_adapter.S3Adapter.put_object",
            side_effect=RuntimeError("S3 down"),
        ):
            response = handler(event, lambda_context)

        assert response["statusCode"] == 500
        assert projects_table.scan()["Items"] == []
        assert s3_object_keys() == []

    def test_options_preflight(self, lambda_context) -> None:
        response = handler({"httpMethod": "OPTIONS"}, lambda_context)

        assert response["statusCode"] == 204
