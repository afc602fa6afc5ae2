"""Top-level sequencing for one Bot Manager invocation."""

from __future__ import annotations

import time
from datetime import datetime
from threading import Event
from typing import Callable, Mapping

from packages.botmanager_shared.config import BotManagerSettings
from packages.botmanager_shared.logging import get_logger, init_log_sinks, log_context
from packages.botmanager_shared.logging import fields
from resources.adapters.telegram.adapter import BotBackend
from services.action.bot_manager.access_guard import AccessGuard
from services.action.bot_manager.domain import Action, InboundRequest
from services.action.bot_manager.errors import AccessDeniedError
from services.action.bot_manager.extras import apply_bot_extras
from services.action.bot_manager.output import OutputBuffer
from services.action.bot_manager.poll_loop import PollLoop, loop_duration, loop_interval
from services.action.bot_manager.webhook_controller import WebhookController

_LOGGER = get_logger(__name__)

SinkInitializer = Callable[[Mapping[str, str]], object]


class RequestRouter:
    """Selects webhook-admin, webhook-delivery or polling mode for one run.

    A router instance, its ``Action`` and its ``OutputBuffer`` are scoped to a
    single invocation; build a new router per inbound request.
    """

    def __init__(
        self,
        *,
        settings: BotManagerSettings,
        backend: BotBackend,
        request: InboundRequest,
        output: OutputBuffer | None = None,
        sink_initializer: SinkInitializer = init_log_sinks,
        clock: Callable[[], float] = time.time,
        sleeper: Callable[[float], None] = time.sleep,
        now: Callable[[], datetime] = datetime.now,
        stop_event: Event | None = None,
    ) -> None:
        self._settings = settings
        self._backend = backend
        self._request = request
        self._action = Action.parse(request.action)
        self._output = output if output is not None else OutputBuffer()
        self._sink_initializer = sink_initializer
        self._stop_event = stop_event
        self._guard = AccessGuard(settings=settings.bot)
        self._webhooks = WebhookController(
            backend=backend,
            settings=settings.bot,
            output=self._output,
            sleeper=sleeper,
        )
        self._poller = PollLoop(
            backend=backend,
            output=self._output,
            clock=clock,
            sleeper=sleeper,
            now=now,
        )

    @property
    def action(self) -> Action:
        return self._action

    @property
    def output(self) -> OutputBuffer:
        return self._output

    def run(self, *, force_secret: bool = False) -> OutputBuffer:
        """Authorize the invocation and execute the selected sub-flow.

        Raises:
            AccessDeniedError: Secret mismatch or disallowed delivery source.
            InvalidWebhookError: ``set``/``reset`` without a webhook URL.
            TelegramAdapterError: Platform failure outside of polling.
        """
        with log_context({fields.ACTION: self._action.value}):
            self._sink_initializer(self._settings.logging.sinks)
            self._guard.validate_secret(self._request, force=force_secret)

            if self._action.is_webhook_admin:
                self._webhooks.apply(self._action)
            else:
                apply_bot_extras(self._backend, self._settings.bot)
                self._handle()

        return self._output

    def _handle(self) -> None:
        """Poll when no webhook is configured, otherwise process the delivery."""
        if not self._settings.bot.webhook.url:
            duration = loop_duration(self._request.loop_duration)
            with log_context({fields.MODE: "polling"}):
                if duration > 0:
                    self._poller.loop(
                        duration,
                        loop_interval(self._request.loop_interval),
                        stop_event=self._stop_event,
                    )
                else:
                    self._poller.single_poll()
            return

        with log_context({fields.MODE: "webhook"}):
            if not self._guard.is_valid_webhook_source(self._request):
                raise AccessDeniedError("Invalid access")
            self._backend.handle_inbound_delivery(self._request.body)
            _LOGGER.info("webhook delivery dispatched")
