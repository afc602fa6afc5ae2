"""Unit tests for the shared HTTP client wrapper."""

from __future__ import annotations

import httpx
import pytest

from packages.botmanager_shared.http import (
    HttpClient,
    HttpJsonDecodeError,
    HttpRequestError,
    HttpStatusError,
)


def _client(handler, **kwargs) -> HttpClient:
    return HttpClient(
        base_url="https://example.test",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


def test_post_json_decodes_error_status_bodies() -> None:
    """post_json should return JSON error envelopes instead of raising."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"ok": False, "description": "Bad"}, request=request)

    client = _client(handler)
    try:
        assert client.post_json("/method", json={}) == {"ok": False, "description": "Bad"}
    finally:
        client.close()


def test_post_json_raises_status_error_for_non_json_failure() -> None:
    """Non-JSON error responses should still map to HttpStatusError."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable", request=request)

    client = _client(handler)
    try:
        with pytest.raises(HttpStatusError) as exc_info:
            client.post_json("/method")
    finally:
        client.close()

    error = exc_info.value
    assert error.method == "POST"
    assert error.status_code == 503
    assert error.retryable is True
    assert error.response_body == "unavailable"


def test_post_json_raises_decode_error_for_non_json_success() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>", request=request)

    with _client(handler) as client:
        with pytest.raises(HttpJsonDecodeError) as exc_info:
            client.post_json("/method")

    assert exc_info.value.status_code == 200


def test_transport_failure_maps_to_request_error_with_redacted_url() -> None:
    """HttpClient should raise HttpRequestError and mask configured secrets."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection failed", request=request)

    client = _client(handler, redact=("123:secret",))
    try:
        with pytest.raises(HttpRequestError) as exc_info:
            client.post_json("/bot123:secret/getMe", json={})
    finally:
        client.close()

    error = exc_info.value
    assert error.url == "https://example.test/bot***/getMe"
    assert "123:secret" not in str(error)
    assert error.retryable is True
    assert isinstance(error.cause, httpx.ConnectError)


def test_request_without_raise_for_status_returns_response() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, text="missing", request=request)

    with _client(handler) as client:
        response = client.request("GET", "/x", raise_for_status=False)

    assert response.status_code == 404
