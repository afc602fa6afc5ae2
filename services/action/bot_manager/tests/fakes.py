"""Shared test doubles for Bot Manager service tests."""

from __future__ import annotations

from typing import Any

from packages.botmanager_shared.config import BotManagerSettings
from resources.adapters.telegram.entities import ServerResponse, Update, UpdatesResponse


def make_settings(**bot: Any) -> BotManagerSettings:
    """Build root settings with a valid token and secret plus ``bot`` overrides."""
    values: dict[str, Any] = {"api_key": "123:token", "secret": "s3cret"}
    values.update(bot)
    return BotManagerSettings.model_validate({"bot": values})


def message_update(update_id: int, sender: int, text: str | None) -> Update:
    payload: dict[str, Any] = {
        "update_id": update_id,
        "message": {
            "message_id": update_id,
            "from": {"id": sender, "is_bot": False, "first_name": "Test"},
        },
    }
    if text is not None:
        payload["message"]["text"] = text
    return Update.model_validate(payload)


class FakeBackend:
    """Backend fake recording every call with programmable responses."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []
        self.updates_responses: list[UpdatesResponse | Exception] = []
        self.delete_response = ServerResponse(ok=True, result=True, description="Webhook was deleted")
        self.set_response = ServerResponse(ok=True, result=True, description="Webhook was set")
        self.delivery_error: Exception | None = None
        self.closed = False

    def fetch_updates(self) -> UpdatesResponse:
        self.calls.append(("fetch_updates", None))
        if not self.updates_responses:
            return UpdatesResponse(ok=True, result=[])
        response = self.updates_responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def register_webhook(self, url: str, options: dict[str, Any]) -> ServerResponse:
        self.calls.append(("register_webhook", (url, options)))
        return self.set_response

    def deregister_webhook(self) -> ServerResponse:
        self.calls.append(("deregister_webhook", None))
        return self.delete_response

    def handle_inbound_delivery(self, raw_body: bytes) -> None:
        self.calls.append(("handle_inbound_delivery", raw_body))
        if self.delivery_error is not None:
            raise self.delivery_error

    def enable_admins(self, admins: list[int]) -> None:
        self.calls.append(("enable_admins", admins))

    def enable_storage(self, config: dict[str, Any]) -> None:
        self.calls.append(("enable_storage", config))

    def add_commands_paths(self, paths: list[str]) -> None:
        self.calls.append(("add_commands_paths", paths))

    def set_custom_input(self, text: str) -> None:
        self.calls.append(("set_custom_input", text))

    def set_download_path(self, path: str) -> None:
        self.calls.append(("set_download_path", path))

    def set_upload_path(self, path: str) -> None:
        self.calls.append(("set_upload_path", path))

    def set_command_config(self, command: str, config: dict[str, Any]) -> None:
        self.calls.append(("set_command_config", (command, config)))

    def enable_analytics(self, token: str, options: dict[str, Any]) -> None:
        self.calls.append(("enable_analytics", (token, options)))

    def set_limiter(self, enabled: bool, options: dict[str, Any]) -> None:
        self.calls.append(("set_limiter", (enabled, options)))

    def close(self) -> None:
        self.closed = True

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]


class FakeClock:
    """Deterministic clock advanced only by its own ``sleep``."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def time(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
