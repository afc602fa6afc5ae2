"""Webhook registration state machine for ``set``/``unset``/``reset``."""

from __future__ import annotations

import time
from typing import Callable

from packages.botmanager_shared.config import BotSettings
from packages.botmanager_shared.logging import get_logger
from resources.adapters.telegram.adapter import BotBackend
from services.action.bot_manager.domain import Action
from services.action.bot_manager.errors import InvalidWebhookError
from services.action.bot_manager.output import OutputBuffer

_LOGGER = get_logger(__name__)

# Pause between delete and set on reset; the Bot API rate-limits rapid re-registration.
RESET_PAUSE_SECONDS = 1.0


def webhook_registration_url(url: str, secret: str) -> str:
    """Return the URL Telegram should deliver to, carrying the handle action."""
    return f"{url}?a=handle&s={secret}"


class WebhookController:
    """Performs webhook admin actions and records each platform status line."""

    def __init__(
        self,
        *,
        backend: BotBackend,
        settings: BotSettings,
        output: OutputBuffer,
        sleeper: Callable[[float], None] = time.sleep,
    ) -> None:
        self._backend = backend
        self._settings = settings
        self._output = output
        self._sleeper = sleeper

    def apply(self, action: Action) -> None:
        """Run the platform calls for one webhook admin action.

        Raises:
            InvalidWebhookError: ``set``/``reset`` without a webhook URL; no
                platform call is made in that case.
            ValueError: ``action`` is not a webhook admin action.
        """
        if not action.is_webhook_admin:
            raise ValueError(f"{action.value} is not a webhook admin action")

        webhook = self._settings.webhook
        if action.registers and not webhook.url:
            raise InvalidWebhookError("Invalid webhook")

        if action.deregisters:
            self.unset()
            if action is Action.RESET:
                self._sleeper(RESET_PAUSE_SECONDS)

        if action.registers:
            self.set()

    def unset(self) -> None:
        """Deregister the current webhook."""
        response = self._backend.deregister_webhook()
        _LOGGER.info("webhook deregistration answered ok=%s", response.ok)
        self._output.write_line(response.describe())

    def set(self) -> None:
        """Register the configured webhook URL with the non-null options."""
        webhook = self._settings.webhook
        if not webhook.url:
            raise InvalidWebhookError("Invalid webhook")
        response = self._backend.register_webhook(
            webhook_registration_url(webhook.url, self._settings.secret),
            webhook.registration_options(),
        )
        _LOGGER.info("webhook registration answered ok=%s", response.ok)
        self._output.write_line(response.describe())
