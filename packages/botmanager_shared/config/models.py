"""Typed configuration models for Bot Manager runtime settings."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, TypeVar

from pydantic import (
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    field_validator,
    model_validator,
)

from packages.botmanager_shared.ip_ranges import parse_ip_range

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "botmanager" / "botmanager.yaml"

_HTTP_URL_ADAPTER: TypeAdapter[AnyHttpUrl] = TypeAdapter(AnyHttpUrl)


class LoggingSettings(BaseModel):
    """Structured logging configuration plus named file sinks."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    json_output: bool = True
    service: str = "botmanager"
    environment: str = "dev"
    sinks: dict[str, str] = Field(default_factory=dict)


class WebhookSettings(BaseModel):
    """Webhook registration target and Bot API registration options."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    url: str | None = None
    certificate: str | None = None
    max_connections: int | None = Field(default=None, ge=1, le=100)
    allowed_updates: list[str] | None = None

    @field_validator("url", mode="before")
    @classmethod
    def _validate_url(cls, value: object) -> object:
        """Require an absolute http(s) URL while keeping the string verbatim."""
        if value is None:
            return None
        if not isinstance(value, str):
            return value
        url = value.strip()
        if url == "":
            return None
        _HTTP_URL_ADAPTER.validate_python(url)
        return url

    def registration_options(self) -> dict[str, Any]:
        """Return only the non-null Bot API registration options."""
        options = {
            "certificate": self.certificate,
            "max_connections": self.max_connections,
            "allowed_updates": self.allowed_updates,
        }
        return {key: value for key, value in options.items() if value is not None}


class CommandsSettings(BaseModel):
    """Command plugin search paths and per-command configuration objects."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    paths: list[str] | None = None
    configs: dict[str, dict[str, Any]] = Field(default_factory=dict)


class PathsSettings(BaseModel):
    """File transfer directories used by the message-processing backend."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    download: str | None = None
    upload: str | None = None


class AnalyticsSettings(BaseModel):
    """Optional analytics integration token and options."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    token: str | None = None
    options: dict[str, Any] = Field(default_factory=dict)


class LimiterSettings(BaseModel):
    """Outbound request limiter toggle; ``None`` leaves backend defaults."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    enabled: bool | None = None
    options: dict[str, Any] = Field(default_factory=dict)


class BotSettings(BaseModel):
    """Bot credentials, access control and backend extras."""

    model_config = ConfigDict(frozen=True, extra="forbid", coerce_numbers_to_str=True)

    api_key: str
    bot_username: str = ""
    secret: str = ""
    validate_request: bool = True
    valid_ips: list[str] = Field(default_factory=list)
    webhook: WebhookSettings = Field(default_factory=WebhookSettings)
    admins: list[int] | None = None
    storage: dict[str, Any] | None = None
    commands: CommandsSettings = Field(default_factory=CommandsSettings)
    custom_input: str | None = None
    paths: PathsSettings = Field(default_factory=PathsSettings)
    analytics: AnalyticsSettings = Field(default_factory=AnalyticsSettings)
    limiter: LimiterSettings = Field(default_factory=LimiterSettings)

    @field_validator("api_key", mode="before")
    @classmethod
    def _validate_api_key(cls, value: object) -> object:
        """Require a non-empty Bot API token."""
        if not isinstance(value, str):
            return value
        token = value.strip()
        if token == "":
            raise ValueError("api_key must be non-empty")
        return token

    @field_validator("valid_ips")
    @classmethod
    def _validate_ip_ranges(cls, value: list[str]) -> list[str]:
        """Reject allow-list entries that are not valid range notations."""
        for entry in value:
            parse_ip_range(entry)
        return value

    @model_validator(mode="after")
    def _require_secret_for_validation(self) -> "BotSettings":
        """Require a secret whenever inbound request validation is enabled."""
        if self.validate_request and self.secret == "":
            raise ValueError("secret must be non-empty when validate_request is enabled")
        return self


class ComponentNamespaceSettings(BaseModel):
    """Namespace map for grouped component settings under ``components.<kind>``."""

    model_config = ConfigDict(extra="allow")


class ComponentsSettings(BaseModel):
    """Typed ``components`` subtree with support for component-local extras."""

    model_config = ConfigDict(extra="allow")

    adapter: ComponentNamespaceSettings = Field(
        default_factory=ComponentNamespaceSettings
    )


class BotManagerSettings(BaseModel):
    """Root runtime settings resolved from cli/env/yaml/defaults sources."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    bot: BotSettings
    components: ComponentsSettings = Field(default_factory=ComponentsSettings)


TComponentSettings = TypeVar("TComponentSettings", bound=BaseModel)


def resolve_component_settings(
    *,
    settings: BotManagerSettings,
    component_id: str,
    model: type[TComponentSettings],
) -> TComponentSettings:
    """Resolve one component settings object from grouped ``components`` keys."""
    raw_components = settings.components.model_dump(mode="python")
    kind, separator, name = component_id.partition("_")
    if separator and kind == "adapter":
        namespace = raw_components.get(kind, {})
        namespace_path = f"components.{kind}"
        if not isinstance(namespace, dict):
            raise TypeError(f"{namespace_path} must resolve to an object mapping")
        resolved = namespace.get(name, {})
        source_path = f"{namespace_path}.{name}"
    else:
        resolved = raw_components.get(component_id, {})
        source_path = f"components.{component_id}"

    if not isinstance(resolved, dict):
        raise TypeError(f"{source_path} must resolve to an object mapping")
    return model.model_validate(resolved)
