import json
from http import HTTPStatus
from typing import Any, cast

import pytest

from core.utils.constants import ENV_CORS_ALLOWED_ORIGIN
from core.utils.response import ResponseBuilder


def parse_body(resp: dict[str, Any]) -> dict[str, Any]:
    body = resp.get("body")
    if not body:
        return {}

    return cast(dict[str, Any], json.loads(body))


def test_ok_response() -> None:
    resp = ResponseBuilder.ok({"foo": "bar"}, request_id="req-1", cors_origin="*")
    parsed = parse_body(resp)

    assert resp["statusCode"] == HTTPStatus.OK
    assert parsed["foo"] == "bar"
    assert parsed["request_id"] == "req-1"
    assert resp["headers"]["Access-Control-Allow-Origin"] == "*"
    assert resp["headers"]["Content-Type"] == "application/json"


def test_created_response() -> None:
    resp = ResponseBuilder.created({"id": 1})

    assert resp["statusCode"] == HTTPStatus.CREATED
    assert parse_body(resp)["id"] == 1


def test_no_content_response() -> None:
    resp = ResponseBuilder.no_content(cors_origin="https://example.com")

    assert resp["statusCode"] == HTTPStatus.NO_CONTENT
    assert resp["body"] == ""
    assert resp["headers"]["Access-Control-Allow-Origin"] == "https://example.com"


def test_cors_origin_from_environment(monkeypatch) -> None:
    monkeypatch.setenv(ENV_CORS_ALLOWED_ORIGIN, "https://portfolio.example.com")

    resp = ResponseBuilder.ok({})

    assert resp["headers"]["Access-Control-Allow-Origin"] == "https://portfolio.example.com"
    assert "x-api-key" in resp["headers"]["Access-Control-Allow-Headers"].lower()


@pytest.mark.parametrize(
    "func,status,error_name",
    [
        (ResponseBuilder.bad_request, HTTPStatus.BAD_REQUEST, "BAD_REQUEST"),
        (ResponseBuilder.not_found, HTTPStatus.NOT_FOUND, "NOT_FOUND"),
        (
            ResponseBuilder.internal_error,
            HTTPStatus.INTERNAL_SERVER_ERROR,
            "INTERNAL_SERVER_ERROR",
        ),
    ],
)
def test_error_responses_use_explicit_message(func, status, error_name) -> None:
    resp = func("Something happened", request_id="req-2")
    parsed = parse_body(resp)

    assert resp["statusCode"] == status
    assert parsed["error"] == error_name
    assert parsed["message"] == "Something happened"
    assert parsed["request_id"] == "req-2"
    assert "timestamp" in parsed


def test_error_with_code_and_details() -> None:
    resp = ResponseBuilder.bad_request(
        "Thumbnail image is required",
        error="THUMBNAIL_REQUIRED",
        details={"field": "thumbnail"},
    )
    parsed = parse_body(resp)

    assert parsed["error"] == "THUMBNAIL_REQUIRED"
    assert parsed["details"] == {"field": "thumbnail"}
