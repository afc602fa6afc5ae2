"""HTTP ingress tests for status mapping and request snapshotting."""

from __future__ import annotations

from fastapi.testclient import TestClient

from packages.botmanager_shared.http import RawRequestData
from resources.adapters.telegram.adapter import TelegramAdapterDependencyError
from resources.adapters.telegram.entities import UpdatesResponse
from services.action.bot_manager.http_ingress import (
    create_ingress_app,
    inbound_request_from_http,
)
from services.action.bot_manager.tests.fakes import (
    FakeBackend,
    make_settings,
    message_update,
)

_HOOK_URL = "https://bot.example.com/hook"
_PLATFORM_HEADERS = {"X-Forwarded-For": "149.154.167.210"}


def _client(backend: FakeBackend, **bot: object) -> TestClient:
    app = create_ingress_app(settings=make_settings(**bot), backend=backend)
    return TestClient(app)


def test_inbound_request_maps_query_and_proxy_headers() -> None:
    raw = RawRequestData(
        body=b"{}",
        query={"a": "reset", "s": "x", "l": "", "i": "5"},
        headers={"x-forwarded-for": "10.0.0.1", "client-ip": "10.0.0.2"},
        client_host="127.0.0.1",
    )

    inbound = inbound_request_from_http(raw)

    assert inbound.action == "reset"
    assert inbound.secret_echo == "x"
    assert inbound.loop_duration == ""
    assert inbound.loop_interval == "5"
    assert inbound.forwarded_for == "10.0.0.1"
    assert inbound.client_ip == "10.0.0.2"
    assert inbound.remote_addr == "127.0.0.1"
    assert inbound.unattended is False


def test_delivery_from_platform_is_processed() -> None:
    backend = FakeBackend()
    client = _client(backend, webhook={"url": _HOOK_URL})

    response = client.post(
        "/?a=handle&s=s3cret",
        content=b'{"update_id": 1}',
        headers=_PLATFORM_HEADERS,
    )

    assert response.status_code == 200
    assert backend.calls == [("handle_inbound_delivery", b'{"update_id": 1}')]


def test_delivery_from_unknown_source_is_forbidden() -> None:
    backend = FakeBackend()
    client = _client(backend, webhook={"url": _HOOK_URL})

    response = client.post(
        "/?s=s3cret",
        content=b"{}",
        headers={"X-Forwarded-For": "1.2.3.4"},
    )

    assert response.status_code == 403
    assert response.text == "Invalid access\n"
    assert backend.calls == []


def test_wrong_secret_is_forbidden() -> None:
    response = _client(FakeBackend()).get("/?a=unset&s=wrong")

    assert response.status_code == 403


def test_invalid_action_is_bad_request() -> None:
    response = _client(FakeBackend()).get("/?a=explode&s=s3cret")

    assert response.status_code == 400
    assert response.text == "Invalid action: explode\n"


def test_set_without_url_is_server_error() -> None:
    response = _client(FakeBackend()).get("/?a=set&s=s3cret")

    assert response.status_code == 500
    assert response.text == "Invalid webhook\n"


def test_admin_action_returns_status_lines() -> None:
    backend = FakeBackend()

    response = _client(backend, webhook={"url": _HOOK_URL}).get("/?a=reset&s=s3cret")

    assert response.status_code == 200
    assert response.text == "Webhook was deleted\nWebhook was set\n"


def test_single_poll_output_is_returned_as_body() -> None:
    backend = FakeBackend()
    backend.updates_responses.append(
        UpdatesResponse(ok=True, result=[message_update(3, 42, "hello")])
    )

    response = _client(backend).get("/?s=s3cret")

    assert response.status_code == 200
    assert response.text.splitlines()[1:] == ["42: hello"]
    assert "Updates processed: 1" in response.text


def test_platform_failure_on_delivery_is_bad_gateway() -> None:
    backend = FakeBackend()
    backend.delivery_error = TelegramAdapterDependencyError("token=secret leaked?")
    client = _client(backend, webhook={"url": _HOOK_URL})

    response = client.post("/?s=s3cret", content=b"{}", headers=_PLATFORM_HEADERS)

    assert response.status_code == 502
    assert response.text == "Upstream platform failure\n"
