"""HTTP transport for the NCloud API Gateway.

Every call is a signed GET/POST to <base_path>/<operation> with the
operation's parameters in the query string. The gateway authenticates the
request with the v2 signature:

  message   = "<METHOD> <URI>\\n<TIMESTAMP>\\n<ACCESS_KEY>"
  signature = base64(HMAC-SHA256(secret_key, message))

URI is the path plus query string exactly as sent, so the query is built
here rather than by requests.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import logging
import time
from typing import Any, Dict, Optional
from urllib.parse import urlencode, urlsplit

import requests

from internal.ncloud.configuration import Configuration

logger = logging.getLogger(__name__)

HEADER_TIMESTAMP = "x-ncp-apigw-timestamp"
HEADER_ACCESS_KEY = "x-ncp-iam-access-key"
HEADER_SIGNATURE = "x-ncp-apigw-signature-v2"


class NcloudAPIError(Exception):
    """Raised when the gateway or the service rejects a call."""

    def __init__(self, message: str, status: Optional[int] = None,
                 return_code: Optional[str] = None, return_message: Optional[str] = None):
        super().__init__(message)
        self.status = status
        self.return_code = return_code
        self.return_message = return_message

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "returnCode": self.return_code,
            "returnMessage": self.return_message,
        }


def make_signature(method: str, uri: str, timestamp: str, access_key: str, secret_key: str) -> str:
    message = f"{method} {uri}\n{timestamp}\n{access_key}"
    digest = hmac.new(secret_key.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).digest()
    return base64.b64encode(digest).decode("utf-8")


def _current_millis() -> str:
    return str(int(time.time() * 1000))


class APIClient:
    def __init__(self, configuration: Configuration, session: Optional[requests.Session] = None,
                 clock=_current_millis):
        self.configuration = configuration
        self.session = session or requests.Session()
        self._clock = clock

    def build_uri(self, operation: str, params: Dict[str, Any]) -> str:
        """Return the signed path + query for an operation (no scheme/host)."""
        query = [(k, _query_value(v)) for k, v in params.items() if v is not None]
        query.append(("responseFormatType", "json"))
        path = urlsplit(self.configuration.base_path).path.rstrip("/")
        return f"{path}/{operation}?{urlencode(query)}"

    def sign_headers(self, method: str, uri: str) -> Dict[str, str]:
        headers = dict(self.configuration.default_header)
        headers["User-Agent"] = self.configuration.user_agent
        api_key = self.configuration.api_key
        if api_key is None:
            return headers

        timestamp = self._clock()
        headers[HEADER_TIMESTAMP] = timestamp
        headers[HEADER_ACCESS_KEY] = api_key.access_key
        headers[HEADER_SIGNATURE] = make_signature(
            method, uri, timestamp, api_key.access_key, api_key.secret_key,
        )
        return headers

    def call_api(self, method: str, operation: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """Send a signed request and return the decoded JSON body.

        Raises:
            NcloudAPIError: On transport failure, a non-2xx status, or a
                body that is not JSON.
        """
        method = method.upper()
        uri = self.build_uri(operation, params)
        parts = urlsplit(self.configuration.base_path)
        url = f"{parts.scheme}://{parts.netloc}{uri}"
        headers = self.sign_headers(method, uri)

        logger.debug("NCloud request %s %s", method, uri)
        try:
            resp = self.session.request(
                method, url, headers=headers, timeout=self.configuration.timeout,
            )
        except requests.exceptions.RequestException as exc:
            raise NcloudAPIError(f"{operation}: request failed: {exc}") from exc

        if resp.status_code < 200 or resp.status_code >= 300:
            raise _error_from_response(operation, resp)

        try:
            return resp.json()
        except ValueError as exc:
            raise NcloudAPIError(
                f"{operation}: response is not valid JSON", status=resp.status_code,
            ) from exc


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _error_from_response(operation: str, resp) -> NcloudAPIError:
    return_code = None
    return_message = None
    try:
        body = resp.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        if "responseError" in body:
            err = body["responseError"] or {}
            return_code = err.get("returnCode")
            return_message = err.get("returnMessage")
        elif "error" in body:
            err = body["error"] or {}
            return_code = err.get("errorCode")
            return_message = err.get("message")
            if err.get("details"):
                return_message = f"{return_message} ({err['details']})"

    if return_message is None:
        return_message = (resp.text or "").strip() or resp.reason

    return NcloudAPIError(
        f"{operation}: status {resp.status_code}, returnCode {return_code}, {return_message}",
        status=resp.status_code,
        return_code=return_code,
        return_message=return_message,
    )
