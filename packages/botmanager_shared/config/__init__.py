"""Public API for shared Bot Manager configuration utilities."""

from .loader import ENV_PREFIX, load_config, load_settings
from .models import (
    DEFAULT_CONFIG_PATH,
    AnalyticsSettings,
    BotManagerSettings,
    BotSettings,
    CommandsSettings,
    ComponentsSettings,
    LimiterSettings,
    LoggingSettings,
    PathsSettings,
    WebhookSettings,
    resolve_component_settings,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ENV_PREFIX",
    "AnalyticsSettings",
    "BotManagerSettings",
    "BotSettings",
    "CommandsSettings",
    "ComponentsSettings",
    "LimiterSettings",
    "LoggingSettings",
    "PathsSettings",
    "WebhookSettings",
    "load_config",
    "load_settings",
    "resolve_component_settings",
]
