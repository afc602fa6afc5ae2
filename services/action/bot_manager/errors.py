"""Run-level error taxonomy for Bot Manager.

Platform transport/protocol failures are raised by the backend resource as
``TelegramAdapterError`` subclasses and are not redeclared here.
"""

from __future__ import annotations


class BotManagerError(Exception):
    """Base exception for failures the caller must present."""


class InvalidActionError(BotManagerError):
    """Action token outside ``set``/``unset``/``reset``/``handle``."""


class AccessDeniedError(BotManagerError):
    """Secret mismatch or inbound source not allow-listed."""


class InvalidWebhookError(BotManagerError):
    """Webhook registration requested without a configured webhook URL."""
