"""Transport-agnostic messaging backend protocol, errors and extras state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Protocol, runtime_checkable

from resources.adapters.telegram.entities import ServerResponse, Update, UpdatesResponse


class TelegramAdapterError(Exception):
    """Base exception for messaging backend failures."""


class TelegramAdapterDependencyError(TelegramAdapterError):
    """Dependency-level failure (network/upstream unavailable)."""


class TelegramAdapterInternalError(TelegramAdapterError):
    """Internal failure (malformed response, body or local resource)."""


@dataclass
class BackendExtras:
    """Optional backend features applied from configuration before handling."""

    admins: set[int] = field(default_factory=set)
    storage: dict[str, Any] | None = None
    commands_paths: list[str] = field(default_factory=list)
    command_configs: dict[str, dict[str, Any]] = field(default_factory=dict)
    custom_input: str | None = None
    download_path: str | None = None
    upload_path: str | None = None
    analytics_token: str | None = None
    analytics_options: dict[str, Any] = field(default_factory=dict)
    limiter_enabled: bool = False
    limiter_options: dict[str, Any] = field(default_factory=dict)

    def is_admin(self, user_id: int) -> bool:
        return user_id in self.admins


UpdateProcessor = Callable[[Update, BackendExtras], None]


@runtime_checkable
class BotBackend(Protocol):
    """Narrow message-processing backend interface consumed by Bot Manager."""

    def fetch_updates(self) -> UpdatesResponse:
        """Fetch and process pending updates once."""

    def register_webhook(self, url: str, options: dict[str, Any]) -> ServerResponse:
        """Register ``url`` as the platform webhook target."""

    def deregister_webhook(self) -> ServerResponse:
        """Remove the current platform webhook registration."""

    def handle_inbound_delivery(self, raw_body: bytes) -> None:
        """Parse and process one webhook delivery body."""

    def enable_admins(self, admins: list[int]) -> None: ...

    def enable_storage(self, config: dict[str, Any]) -> None: ...

    def add_commands_paths(self, paths: list[str]) -> None: ...

    def set_custom_input(self, text: str) -> None: ...

    def set_download_path(self, path: str) -> None: ...

    def set_upload_path(self, path: str) -> None: ...

    def set_command_config(self, command: str, config: dict[str, Any]) -> None: ...

    def enable_analytics(self, token: str, options: dict[str, Any]) -> None: ...

    def set_limiter(self, enabled: bool, options: dict[str, Any]) -> None: ...

    def close(self) -> None:
        """Release transport resources owned by the backend."""
