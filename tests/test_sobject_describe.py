"""Tests for SObject describe clients (network is always mocked)."""

from __future__ import annotations

import io
import json
from typing import Any
from urllib.error import HTTPError, URLError

import pytest

from src.sobject.describe import (
    DescribeError,
    RestDescribeClient,
    StaticDescriber,
    flatten_compound_fields,
)

_DESCRIBE_PAYLOAD = {
    "name": "Account",
    "fields": [
        {"name": "Id", "type": "id"},
        {"name": "BillingStreet", "type": "textarea", "compoundFieldName": "BillingAddress"},
        {"name": "BillingCity", "type": "string", "compoundFieldName": "BillingAddress"},
        {"name": "BillingAddress", "type": "address"},
        {"name": "Location__Latitude__s", "type": "double", "compoundFieldName": "Location__c"},
        {"name": "Location__c", "type": "location"},
        {"name": "LastModifiedDate", "type": "datetime"},
    ],
}


class _FakeResponse(io.BytesIO):
    def __enter__(self) -> _FakeResponse:
        return self

    def __exit__(self, *_exc: Any) -> None:
        self.close()


def _client() -> RestDescribeClient:
    return RestDescribeClient(
        instance_url="https://example.my.salesforce.com/",
        access_token="token",
        api_version="52.0",
    )


def test_flatten_compound_fields_keeps_leaves_in_order() -> None:
    assert flatten_compound_fields(_DESCRIBE_PAYLOAD["fields"]) == [
        "Id",
        "BillingStreet",
        "BillingCity",
        "Location__Latitude__s",
        "LastModifiedDate",
    ]


def test_rest_client_requests_describe_endpoint(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: dict[str, Any] = {}

    def _fake_urlopen(req: Any, timeout: float) -> _FakeResponse:
        seen["url"] = req.full_url
        seen["auth"] = req.get_header("Authorization")
        seen["timeout"] = timeout
        return _FakeResponse(json.dumps(_DESCRIBE_PAYLOAD).encode())

    monkeypatch.setattr("src.sobject.describe.urlopen", _fake_urlopen)

    fields = _client().describe("Account")

    assert fields[0] == "Id"
    assert "BillingAddress" not in fields
    assert seen["url"] == (
        "https://example.my.salesforce.com/services/data/v52.0/sobjects/Account/describe/"
    )
    assert seen["auth"] == "Bearer token"
    assert seen["timeout"] == 30.0


@pytest.mark.parametrize(
    "error",
    [
        HTTPError("https://example", 404, "Not Found", None, None),  # type: ignore[arg-type]
        URLError("connection refused"),
    ],
)
def test_rest_client_wraps_transport_errors(
        monkeypatch: pytest.MonkeyPatch,
        error: Exception,
) -> None:
    def _fake_urlopen(_req: Any, timeout: float) -> _FakeResponse:
        raise error

    monkeypatch.setattr("src.sobject.describe.urlopen", _fake_urlopen)

    with pytest.raises(DescribeError):
        _client().describe("Account")


def test_rest_client_rejects_unexpected_payload(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "src.sobject.describe.urlopen",
        lambda _req, timeout: _FakeResponse(b'{"errorCode": "NOT_FOUND"}'),
    )

    with pytest.raises(DescribeError):
        _client().describe("Account")


def test_static_describer() -> None:
    describer = StaticDescriber({"Account": ("Id", "Name")})

    assert describer.describe("Account") == ["Id", "Name"]
    with pytest.raises(DescribeError):
        describer.describe("Contact")
