"""Tests for the signed NCloud HTTP transport."""

import base64
import hashlib
import hmac

import pytest
import requests

from internal.ncloud.client import (
    HEADER_ACCESS_KEY, HEADER_SIGNATURE, HEADER_TIMESTAMP,
    APIClient, NcloudAPIError, make_signature,
)
from internal.ncloud.configuration import APIKey, new_configuration

from conftest import FakeResponse, FakeSession


def _client(session, api_key=APIKey("AK", "SK")):
    cfg = new_configuration("vmysql", api_key, environ={})
    return APIClient(cfg, session=session, clock=lambda: "1700000000000")


# ── Signature ────────────────────────────────────────────────────────────────

def test_make_signature_is_hmac_sha256_base64():
    uri = "/vmysql/v2/getCloudMysqlProductList?regionCode=KR&responseFormatType=json"
    message = f"POST {uri}\n1700000000000\nAK".encode("utf-8")
    expected = base64.b64encode(hmac.new(b"SK", message, hashlib.sha256).digest()).decode()
    assert make_signature("POST", uri, "1700000000000", "AK", "SK") == expected


def test_signature_depends_on_uri():
    a = make_signature("GET", "/a?x=1", "1", "AK", "SK")
    b = make_signature("GET", "/a?x=2", "1", "AK", "SK")
    assert a != b


# ── URI building ─────────────────────────────────────────────────────────────

def test_build_uri_drops_none_and_adds_json_format():
    client = _client(FakeSession())
    uri = client.build_uri("getCloudMysqlProductList", {
        "regionCode": "KR", "productCode": None, "cloudMysqlImageProductCode": "IMG.1",
    })
    assert uri == (
        "/vmysql/v2/getCloudMysqlProductList"
        "?regionCode=KR&cloudMysqlImageProductCode=IMG.1&responseFormatType=json"
    )


def test_build_uri_renders_bools_lowercase():
    client = _client(FakeSession())
    uri = client.build_uri("op", {"isActive": True})
    assert "isActive=true" in uri


# ── call_api ─────────────────────────────────────────────────────────────────

def test_call_api_signs_request():
    session = FakeSession(FakeResponse(200, {"ok": True}))
    client = _client(session)
    assert client.call_api("post", "getCloudMysqlProductList", {"regionCode": "KR"}) == {"ok": True}

    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == (
        "https://ncloud.apigw.ntruss.com/vmysql/v2/getCloudMysqlProductList"
        "?regionCode=KR&responseFormatType=json"
    )
    headers = call["headers"]
    assert headers[HEADER_TIMESTAMP] == "1700000000000"
    assert headers[HEADER_ACCESS_KEY] == "AK"
    assert headers[HEADER_SIGNATURE] == make_signature(
        "POST",
        "/vmysql/v2/getCloudMysqlProductList?regionCode=KR&responseFormatType=json",
        "1700000000000", "AK", "SK",
    )
    assert headers["User-Agent"] == "vmysql/1.0.0/python"
    assert call["timeout"] == 30.0


def test_call_api_without_key_sends_no_signature():
    session = FakeSession(FakeResponse(200, {}))
    _client(session, api_key=None).call_api("GET", "op", {})
    assert HEADER_SIGNATURE not in session.calls[0]["headers"]


def test_response_error_envelope():
    body = {"responseError": {"returnCode": "5001017", "returnMessage": "Invalid image product code"}}
    client = _client(FakeSession(FakeResponse(400, body, reason="Bad Request")))
    with pytest.raises(NcloudAPIError) as exc_info:
        client.call_api("POST", "getCloudMysqlProductList", {})
    err = exc_info.value
    assert err.status == 400
    assert err.return_code == "5001017"
    assert err.return_message == "Invalid image product code"
    assert "getCloudMysqlProductList" in str(err)


def test_gateway_error_envelope():
    body = {"error": {"errorCode": "200", "message": "Authentication Failed", "details": "Invalid authentication information."}}
    client = _client(FakeSession(FakeResponse(401, body, reason="Unauthorized")))
    with pytest.raises(NcloudAPIError) as exc_info:
        client.call_api("POST", "op", {})
    assert exc_info.value.return_code == "200"
    assert exc_info.value.return_message.startswith("Authentication Failed")
    assert exc_info.value.to_dict()["status"] == 401


def test_error_without_json_body_uses_text():
    client = _client(FakeSession(FakeResponse(503, text="upstream down", reason="Service Unavailable")))
    with pytest.raises(NcloudAPIError) as exc_info:
        client.call_api("POST", "op", {})
    assert exc_info.value.return_message == "upstream down"


def test_transport_failure_is_wrapped():
    client = _client(FakeSession(error=requests.exceptions.ConnectionError("refused")))
    with pytest.raises(NcloudAPIError) as exc_info:
        client.call_api("POST", "op", {})
    assert exc_info.value.status is None
    assert "refused" in str(exc_info.value)


def test_non_json_success_body():
    client = _client(FakeSession(FakeResponse(200, text="<html>")))
    with pytest.raises(NcloudAPIError):
        client.call_api("POST", "op", {})
