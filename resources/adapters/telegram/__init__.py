"""Telegram Bot API backend resource exports."""

from resources.adapters.telegram.adapter import (
    BackendExtras,
    BotBackend,
    TelegramAdapterDependencyError,
    TelegramAdapterError,
    TelegramAdapterInternalError,
    UpdateProcessor,
)
from resources.adapters.telegram.config import (
    RESOURCE_COMPONENT_ID,
    TelegramAdapterSettings,
    resolve_telegram_adapter_settings,
)
from resources.adapters.telegram.entities import (
    ChosenInlineResult,
    InlineQuery,
    Message,
    ServerResponse,
    TelegramUser,
    Update,
    UpdatesResponse,
)
from resources.adapters.telegram.telegram_adapter import HttpTelegramBackend, log_update

__all__ = [
    "BackendExtras",
    "BotBackend",
    "ChosenInlineResult",
    "HttpTelegramBackend",
    "InlineQuery",
    "Message",
    "RESOURCE_COMPONENT_ID",
    "ServerResponse",
    "TelegramAdapterDependencyError",
    "TelegramAdapterError",
    "TelegramAdapterInternalError",
    "TelegramAdapterSettings",
    "TelegramUser",
    "Update",
    "UpdateProcessor",
    "UpdatesResponse",
    "log_update",
    "resolve_telegram_adapter_settings",
]
