"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from emvqr.api import app
from emvqr.config import settings


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def headers() -> dict[str, str]:
    return {"X-API-Key": settings.api_key}


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_metrics(client):
    client.get("/health")
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "emvqr_http_requests_total" in response.text


def test_decode(client, headers, sample_payload):
    response = client.post("/v1/decode", json={"payload": sample_payload}, headers=headers)
    assert response.status_code == 200
    body = response.json()
    assert body["crc"] == "A13A"
    assert body["fields"]["29"]["00"] == "D15600000000"
    assert body["fields"]["64"]["01"] == "最佳运输"
    assert body["tags"][0] == "00"
    assert body["tags"][-1] == "63"


def test_decode_bad_checksum(client, headers):
    response = client.post("/v1/decode", json={"payload": "0002016304AAE7"}, headers=headers)
    assert response.status_code == 400
    assert response.json()["code"] == "ERR_CHECKSUM_MISMATCH"


def test_decode_bad_header(client, headers):
    response = client.post(
        "/v1/decode",
        json={"payload": "C0020191320016A01122334499887707081234567863044D32"},
        headers=headers,
    )
    assert response.status_code == 400
    assert response.json()["code"] == "ERR_INVALID_HEADER"


def test_wrong_api_key(client, sample_payload):
    response = client.post("/v1/decode", json={"payload": sample_payload}, headers={"X-API-Key": "nope"})
    assert response.status_code == 401


def test_encode(client, headers, template_payload):
    response = client.post(
        "/v1/encode",
        json={"fields": {"00": "01", "91": {"00": "A011223344998877", "07": "12345678"}}},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json() == {"payload": template_payload, "crc": "4D32"}


def test_encode_skips_null_fields(client, headers, template_payload):
    response = client.post(
        "/v1/encode",
        json={"fields": {"58": None, "91": {"00": "A011223344998877", "05": None, "07": "12345678"}}},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json()["payload"] == template_payload


def test_encode_rejects_non_string_value(client, headers):
    response = client.post("/v1/encode", json={"fields": {"62": {"05": None, "07": 5}}}, headers=headers)
    assert response.status_code == 400
    assert response.json()["code"] == "ERR_INVALID_ELEMENT"


def test_encode_too_large(client, headers):
    fields = {tag: "X" * 99 for tag in ("10", "11", "12", "13")}
    fields["14"] = "X" * 83
    response = client.post("/v1/encode", json={"fields": fields}, headers=headers)
    assert response.status_code == 413
    assert response.json()["code"] == "ERR_PAYLOAD_TOO_LARGE"


def test_encode_invalid_tag(client, headers):
    response = client.post("/v1/encode", json={"fields": {"ZZ": "x"}}, headers=headers)
    assert response.status_code == 400
    assert response.json()["code"] == "ERR_INVALID_TAG"


def test_inspect(client, headers, sample_payload):
    response = client.post(
        "/v1/inspect",
        json={"payload": sample_payload, "paths": ["58", "62.03", "99"]},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json() == {"values": {"58": "CN", "62.03": "1234", "99": None}}


def test_inspect_invalid_path(client, headers, sample_payload):
    response = client.post(
        "/v1/inspect",
        json={"payload": sample_payload, "paths": ["58.01"]},
        headers=headers,
    )
    assert response.status_code == 400
    assert response.json()["code"] == "ERR_INVALID_PATH"


def test_amend(client, headers, template_payload):
    response = client.post(
        "/v1/amend",
        json={"payload": template_payload, "updates": {"91.00": None}},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json() == {"payload": "000201911207081234567863040E4D", "crc": "0E4D"}
