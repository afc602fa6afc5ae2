"""Pydantic settings for the Telegram Bot API backend resource."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from packages.botmanager_shared.config import (
    BotManagerSettings,
    resolve_component_settings,
)

RESOURCE_COMPONENT_ID = "adapter_telegram"


class TelegramAdapterSettings(BaseModel):
    """Runtime settings for Bot API calls."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    base_url: str = "https://api.telegram.org"
    timeout_seconds: float = Field(default=10.0, gt=0)
    get_updates_limit: int = Field(default=100, ge=1, le=100)
    get_updates_timeout_seconds: int = Field(default=0, ge=0)

    @field_validator("base_url", mode="before")
    @classmethod
    def _normalize_base_url(cls, value: object) -> object:
        """Strip trailing slashes so method paths join cleanly."""
        if not isinstance(value, str):
            return value
        normalized = value.strip().rstrip("/")
        if normalized == "":
            raise ValueError("base_url must be non-empty")
        return normalized


def resolve_telegram_adapter_settings(
    settings: BotManagerSettings,
) -> TelegramAdapterSettings:
    """Resolve adapter settings from ``components.adapter.telegram``."""
    return resolve_component_settings(
        settings=settings,
        component_id=RESOURCE_COMPONENT_ID,
        model=TelegramAdapterSettings,
    )
