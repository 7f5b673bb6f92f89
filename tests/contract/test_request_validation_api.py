"""Contract tests for body/URL validation and the middleware chain over HTTP."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import Depends
from fastapi import FastAPI
from fastapi import Request
from fastapi.testclient import TestClient

from reqcheck.api.request import get_validated_body
from reqcheck.api.request import validated_body
from reqcheck.api.request import validated_query
from reqcheck.core.config import Settings
from reqcheck.main import create_app
from reqcheck.validation import DateTimeValidator
from reqcheck.validation import FloatInRangeValidator
from reqcheck.validation import FloatRange
from reqcheck.validation import IntInRangeValidator
from reqcheck.validation import IntRange
from reqcheck.validation import IntValidator
from reqcheck.validation import NotEmptyValidator
from reqcheck.validation import ObjectIdValidator
from reqcheck.validation import SexValidator
from reqcheck.validation import StringArrayValidator
from reqcheck.validation import StringLengthValidator
from reqcheck.validation import TimezoneValidator
from reqcheck.validation import required_float_validators
from reqcheck.validation import required_string_validators
from reqcheck.validation.values import to_value

SECRET = "Excellent"
HEADERS = {"Secret": SECRET}
OBJECT_ID = "507f1f77bcf86cd799439011"

PERSON_SPEC = {
    "name": required_string_validators("name", StringLengthValidator(2, "name")),
    "sex": required_string_validators("sex", SexValidator("sex")),
    "tags": [StringArrayValidator("tags", [StringLengthValidator(3, "tags")])],
}

LOOKUP_SPEC = {
    "person_id": [NotEmptyValidator("person_id"), ObjectIdValidator("person_id")],
    "page": [NotEmptyValidator("page"), IntValidator("page"), IntInRangeValidator("page", IntRange(bottom=1))],
}

EVENT_SPEC = {
    "starts_at": [NotEmptyValidator("starts_at"), DateTimeValidator("starts_at")],
    "timezone": required_string_validators("timezone", TimezoneValidator("timezone")),
}


def _build_app() -> FastAPI:
    app = create_app(Settings(access_secret=SECRET))

    @app.post("/people")
    def create_person(body: dict[str, Any] = Depends(validated_body(PERSON_SPEC))) -> dict[str, Any]:
        return {"created": body["name"]}

    @app.get("/people/{person_id}")
    def get_person(params: dict[str, Any] = Depends(validated_query(LOOKUP_SPEC))) -> dict[str, Any]:
        return params

    @app.post("/events")
    async def create_event(request: Request) -> dict[str, str]:
        body = await get_validated_body(request, EVENT_SPEC)
        starts_at = DateTimeValidator("starts_at").parse(to_value(body["starts_at"]))
        return {"starts_at": starts_at.isoformat()}

    @app.get("/crash")
    def crash() -> None:
        raise RuntimeError("handler exploded")

    return app


def _client() -> TestClient:
    return TestClient(_build_app())


def test_wrong_type_yields_type_error_envelope() -> None:
    app = create_app(Settings())

    @app.post("/names")
    def create_name(body: dict[str, Any] = Depends(validated_body({"name": required_string_validators("name")}))):
        return body

    response = TestClient(app).post("/names", json={"name": 5})

    assert response.status_code == 400
    first = response.json()["errors"][0]
    assert first["code"] == "TYPE_ERROR"
    assert first["args"] == ["string"]
    assert first["key"] == "name"


def test_valid_body_reaches_handler() -> None:
    response = _client().post("/people", json={"name": "Ada", "sex": "female", "tags": ["abc"]}, headers=HEADERS)

    assert response.status_code == 200
    assert response.json() == {"created": "Ada"}


def test_body_errors_are_collected_across_fields_in_declaration_order() -> None:
    response = _client().post("/people", json={"sex": "other", "tags": ["ab"]}, headers=HEADERS)

    assert response.status_code == 400
    assert [(error["key"], error["code"]) for error in response.json()["errors"]] == [
        ("name", "REQUIRED_FIELD_ERROR"),
        ("sex", "INVALID_SEX_ERROR"),
        ("tags.0", "STRING_LENGTH_ERROR"),
    ]


def test_malformed_json_is_an_invalid_request() -> None:
    response = _client().post(
        "/people",
        content=b"{not json",
        headers={**HEADERS, "content-type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["errors"] == [
        {"key": "undefined", "description": "Invalid request", "code": "INVALID_REQUEST", "args": []}
    ]


def test_non_object_json_is_an_invalid_request() -> None:
    response = _client().post("/people", json=["Ada"], headers=HEADERS)

    assert response.status_code == 400
    assert response.json()["errors"][0]["code"] == "INVALID_REQUEST"


def test_url_parameters_are_typed_and_validated() -> None:
    response = _client().get(f"/people/{OBJECT_ID}", params={"page": "2"}, headers=HEADERS)

    assert response.status_code == 200
    assert response.json() == {"person_id": OBJECT_ID, "page": 2}


def test_malformed_url_parameters_collapse_to_missing() -> None:
    response = _client().get("/people/not-an-id", params={"page": "two"}, headers=HEADERS)

    assert response.status_code == 400
    assert [(error["key"], error["code"]) for error in response.json()["errors"]] == [
        ("person_id", "REQUIRED_FIELD_ERROR"),
        ("page", "REQUIRED_FIELD_ERROR"),
    ]


def test_url_parameter_range_violation() -> None:
    response = _client().get(f"/people/{OBJECT_ID}", params={"page": "0"}, headers=HEADERS)

    assert response.status_code == 400
    assert response.json()["errors"][0]["code"] == "INT_RANGE_ERROR"


def test_datetime_fields_are_parsed_for_handlers() -> None:
    client = _client()

    from_string = client.post(
        "/events", json={"starts_at": "2023-01-01T00:00:00Z", "timezone": "Europe/Paris"}, headers=HEADERS
    )
    from_epoch = client.post("/events", json={"starts_at": 1672531200, "timezone": "Europe/Paris"}, headers=HEADERS)
    invalid = client.post("/events", json={"starts_at": True, "timezone": "Nowhere"}, headers=HEADERS)

    assert from_string.json() == {"starts_at": "2023-01-01T00:00:00+00:00"}
    assert from_epoch.json() == from_string.json()
    assert invalid.status_code == 400
    assert [error["code"] for error in invalid.json()["errors"]] == [
        "INVALID_DATETIME_ERROR",
        "INVALID_TIMEZONE_ERROR",
    ]


def test_missing_or_wrong_secret_is_forbidden() -> None:
    client = _client()

    missing = client.post("/people", json={"name": "Ada", "sex": "female"})
    wrong = client.post("/people", json={"name": "Ada", "sex": "female"}, headers={"Secret": "nope"})

    for response in (missing, wrong):
        assert response.status_code == 403
        assert response.json()["errors"][0]["code"] == "PERMISSION_DENIED"


def test_health_is_exempt_from_access_control() -> None:
    response = _client().get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_handler_crash_is_recovered_as_internal_error() -> None:
    response = _client().get("/crash", headers=HEADERS)

    assert response.status_code == 500
    assert response.json()["errors"] == [
        {
            "key": "undefined",
            "description": "Internal server error",
            "code": "INTERNAL_SERVER_ERROR",
            "args": ["handler exploded"],
        }
    ]


def test_requests_are_logged_with_method_and_duration(caplog) -> None:
    client = _client()

    with caplog.at_level(logging.INFO, logger="reqcheck.api.middleware"):
        client.get("/health")

    records = [record for record in caplog.records if record.name == "reqcheck.api.middleware"]
    assert len(records) == 1
    assert records[0].getMessage().startswith("[GET] 'http://testserver/health' 200 ")


def test_non_standard_json_constants_are_invalid_requests() -> None:
    app = create_app(Settings())
    spec = {"score": required_float_validators("score", FloatInRangeValidator("score", FloatRange(0.0, 10.0)))}

    @app.post("/scores")
    def create_score(body: dict[str, Any] = Depends(validated_body(spec))) -> dict[str, Any]:
        return body

    client = TestClient(app)

    for literal in (b"NaN", b"Infinity", b"-Infinity"):
        response = client.post(
            "/scores",
            content=b'{"score": ' + literal + b"}",
            headers={"content-type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "INVALID_REQUEST"

    assert client.post("/scores", json={"score": 10.5}).json()["errors"][0]["code"] == "FLOAT_RANGE_ERROR"
    assert client.post("/scores", json={"score": 5}).status_code == 200
