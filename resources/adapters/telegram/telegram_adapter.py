"""In-process Bot API backend implementation over HTTP."""

from __future__ import annotations

import json
import threading
from pathlib import Path
from time import monotonic, sleep
from typing import Any, Callable

from pydantic import ValidationError

from packages.botmanager_shared.config import BotManagerSettings
from packages.botmanager_shared.http import (
    HttpClient,
    HttpJsonDecodeError,
    HttpRequestError,
    HttpStatusError,
)
from packages.botmanager_shared.logging import get_logger
from packages.botmanager_shared.logging.fields import (
    DEBUG_SINK_LOGGER,
    ERROR_SINK_LOGGER,
    UPDATE_SINK_LOGGER,
)
from resources.adapters.telegram.adapter import (
    BackendExtras,
    BotBackend,
    TelegramAdapterDependencyError,
    TelegramAdapterInternalError,
    UpdateProcessor,
)
from resources.adapters.telegram.config import (
    TelegramAdapterSettings,
    resolve_telegram_adapter_settings,
)
from resources.adapters.telegram.entities import ServerResponse, Update, UpdatesResponse

_LOGGER = get_logger(__name__)
_DEBUG_LOG = get_logger(DEBUG_SINK_LOGGER)
_ERROR_LOG = get_logger(ERROR_SINK_LOGGER)
_UPDATE_LOG = get_logger(UPDATE_SINK_LOGGER)

_DEFAULT_LIMITER_INTERVAL_SECONDS = 1.0


def log_update(update: Update, extras: BackendExtras) -> None:
    """Default update processor used when no message handler is plugged in."""
    del extras
    _LOGGER.info("update %s received; no processor configured", update.update_id)


class HttpTelegramBackend(BotBackend):
    """Backend issuing ``getUpdates``/``setWebhook``/``deleteWebhook`` calls."""

    def __init__(
        self,
        *,
        api_key: str,
        settings: TelegramAdapterSettings,
        processor: UpdateProcessor | None = None,
        client: HttpClient | None = None,
        clock: Callable[[], float] = monotonic,
        sleeper: Callable[[float], None] = sleep,
    ) -> None:
        token = api_key.strip()
        if token == "":
            raise TelegramAdapterInternalError("api_key must be non-empty")
        self._settings = settings
        self._method_prefix = f"/bot{token}"
        self._client = client or HttpClient(
            base_url=settings.base_url,
            timeout_seconds=settings.timeout_seconds
            + settings.get_updates_timeout_seconds,
            redact=(token,),
        )
        self._processor = processor or log_update
        self._clock = clock
        self._sleeper = sleeper
        self._extras = BackendExtras()
        self._offset: int | None = None
        self._last_call_at: float | None = None
        self._poll_lock = threading.Lock()
        self._throttle_lock = threading.Lock()

    @classmethod
    def from_settings(
        cls,
        *,
        settings: BotManagerSettings,
        processor: UpdateProcessor | None = None,
    ) -> "HttpTelegramBackend":
        """Build a backend from typed root settings."""
        return cls(
            api_key=settings.bot.api_key,
            settings=resolve_telegram_adapter_settings(settings),
            processor=processor,
        )

    @property
    def extras(self) -> BackendExtras:
        """Return the live extras state handed to update processors."""
        return self._extras

    def close(self) -> None:
        self._client.close()

    def fetch_updates(self) -> UpdatesResponse:
        """Fetch pending updates, process each one and acknowledge them.

        After a non-empty batch a follow-up ``getUpdates`` with
        ``offset = last_update_id + 1`` confirms the batch on Telegram's side,
        so the next process does not see it again. Concurrent callers are
        serialized so each update is processed once.
        """
        with self._poll_lock:
            response = self._fetch_and_process()
            if response.ok and response.result and self._extras.custom_input is None:
                self._acknowledge()
            return response

    def _fetch_and_process(self) -> UpdatesResponse:
        payload: dict[str, Any] = {
            "limit": self._settings.get_updates_limit,
            "timeout": self._settings.get_updates_timeout_seconds,
        }
        if self._offset is not None:
            payload["offset"] = self._offset

        raw = self._call("getUpdates", json=payload)
        try:
            response = UpdatesResponse.model_validate(raw)
        except ValidationError as exc:
            _ERROR_LOG.error("getUpdates returned malformed updates: %s", exc)
            raise TelegramAdapterInternalError(
                "telegram getUpdates response malformed"
            ) from None

        if not response.ok:
            return response

        for update in response.result:
            _UPDATE_LOG.info(update.model_dump_json(by_alias=True, exclude_none=True))
            self._processor(update, self._extras)
            self._offset = max(self._offset or 0, update.update_id + 1)
        return response

    def _acknowledge(self) -> None:
        """Confirm every update before ``self._offset`` with the Bot API."""
        self._call("getUpdates", json={"offset": self._offset, "limit": 1, "timeout": 0})
        _DEBUG_LOG.debug("acknowledged updates before offset %s", self._offset)

    def register_webhook(self, url: str, options: dict[str, Any]) -> ServerResponse:
        """Register ``url`` as webhook, uploading a certificate when configured."""
        certificate = options.get("certificate")
        if certificate is None:
            return ServerResponse.model_validate(
                self._call("setWebhook", json={"url": url, **options})
            )

        data: dict[str, str] = {"url": url}
        if options.get("max_connections") is not None:
            data["max_connections"] = str(options["max_connections"])
        if options.get("allowed_updates") is not None:
            data["allowed_updates"] = json.dumps(options["allowed_updates"])

        path = Path(str(certificate))
        try:
            with path.open("rb") as handle:
                raw = self._call(
                    "setWebhook",
                    data=data,
                    files={"certificate": (path.name, handle)},
                )
        except OSError:
            raise TelegramAdapterInternalError(
                f"webhook certificate not readable: {path}"
            ) from None
        return ServerResponse.model_validate(raw)

    def deregister_webhook(self) -> ServerResponse:
        """Delete the current webhook registration."""
        return ServerResponse.model_validate(self._call("deleteWebhook", json={}))

    def handle_inbound_delivery(self, raw_body: bytes) -> None:
        """Parse one webhook body (or the custom input override) and process it."""
        if self._extras.custom_input is not None:
            text = self._extras.custom_input
        else:
            try:
                text = raw_body.decode("utf-8")
            except UnicodeDecodeError:
                raise TelegramAdapterInternalError(
                    "webhook body must be UTF-8 JSON text"
                ) from None

        if text.strip() == "":
            raise TelegramAdapterInternalError("webhook body is empty")

        try:
            update = Update.model_validate(json.loads(text))
        except (json.JSONDecodeError, ValidationError):
            _ERROR_LOG.error("rejected malformed webhook update body")
            raise TelegramAdapterInternalError("webhook body is not a valid update") from None

        _UPDATE_LOG.info(text)
        self._processor(update, self._extras)

    def enable_admins(self, admins: list[int]) -> None:
        self._extras.admins.update(int(admin) for admin in admins)

    def enable_storage(self, config: dict[str, Any]) -> None:
        self._extras.storage = dict(config)

    def add_commands_paths(self, paths: list[str]) -> None:
        for path in paths:
            if path not in self._extras.commands_paths:
                self._extras.commands_paths.append(path)

    def set_custom_input(self, text: str) -> None:
        self._extras.custom_input = text

    def set_download_path(self, path: str) -> None:
        self._extras.download_path = path

    def set_upload_path(self, path: str) -> None:
        self._extras.upload_path = path

    def set_command_config(self, command: str, config: dict[str, Any]) -> None:
        self._extras.command_configs[command] = dict(config)

    def enable_analytics(self, token: str, options: dict[str, Any]) -> None:
        self._extras.analytics_token = token
        self._extras.analytics_options = dict(options)

    def set_limiter(self, enabled: bool, options: dict[str, Any]) -> None:
        self._extras.limiter_enabled = enabled
        self._extras.limiter_options = dict(options)

    def _call(self, method: str, **kwargs: Any) -> dict[str, Any]:
        """Issue one Bot API method call and return the decoded envelope."""
        self._throttle()
        _DEBUG_LOG.debug("bot api call: %s", method)
        try:
            payload = self._client.post_json(f"{self._method_prefix}/{method}", **kwargs)
        except HttpStatusError as exc:
            _ERROR_LOG.error("%s failed with status %s", method, exc.status_code)
            raise TelegramAdapterDependencyError(
                f"telegram {method} failed with status {exc.status_code}"
            ) from None
        except HttpRequestError as exc:
            _ERROR_LOG.error("%s transport failure: %s", method, exc)
            raise TelegramAdapterDependencyError(
                str(exc) or f"telegram {method} unavailable"
            ) from None
        except HttpJsonDecodeError:
            _ERROR_LOG.error("%s returned a non-JSON body", method)
            raise TelegramAdapterInternalError(
                f"telegram {method} response JSON invalid"
            ) from None

        if not isinstance(payload, dict) or "ok" not in payload:
            raise TelegramAdapterInternalError(
                f"telegram {method} response must be an object with 'ok'"
            )
        if payload["ok"] is not True:
            _ERROR_LOG.error(
                "%s not ok: %s %s",
                method,
                payload.get("error_code"),
                payload.get("description"),
            )
        return payload

    def _throttle(self) -> None:
        """Space API calls by the limiter interval when the limiter is enabled."""
        if not self._extras.limiter_enabled:
            return
        interval = float(
            self._extras.limiter_options.get(
                "interval", _DEFAULT_LIMITER_INTERVAL_SECONDS
            )
        )
        with self._throttle_lock:
            now = self._clock()
            if self._last_call_at is not None:
                wait = self._last_call_at + interval - now
                if wait > 0:
                    self._sleeper(wait)
                    now = self._clock()
            self._last_call_at = now
