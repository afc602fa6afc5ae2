"""HTTP entrypoint exposing Bot Manager runs on ``GET|POST /``."""

from __future__ import annotations

from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool

from packages.botmanager_shared.config import BotManagerSettings
from packages.botmanager_shared.http import RawRequestData, create_app, read_raw_request
from packages.botmanager_shared.logging import get_logger
from resources.adapters.telegram.adapter import BotBackend, TelegramAdapterError
from services.action.bot_manager.domain import InboundRequest
from services.action.bot_manager.errors import (
    AccessDeniedError,
    BotManagerError,
    InvalidActionError,
    InvalidWebhookError,
)
from services.action.bot_manager.output import OutputBuffer
from services.action.bot_manager.router import RequestRouter

_LOGGER = get_logger(__name__)

_HEADER_FORWARDED_FOR = "x-forwarded-for"
_HEADER_CLIENT_IP = "client-ip"


def inbound_request_from_http(raw: RawRequestData) -> InboundRequest:
    """Map one raw HTTP request onto the run snapshot."""
    return InboundRequest(
        action=raw.query.get("a"),
        secret_echo=raw.query.get("s"),
        loop_duration=raw.query.get("l"),
        loop_interval=raw.query.get("i"),
        remote_addr=raw.client_host,
        forwarded_for=raw.headers.get(_HEADER_FORWARDED_FOR),
        client_ip=raw.headers.get(_HEADER_CLIENT_IP),
        body=raw.body,
        unattended=False,
    )


def create_ingress_app(
    *,
    settings: BotManagerSettings,
    backend: BotBackend,
) -> FastAPI:
    """Build the FastAPI app that runs one router per inbound request."""
    app = create_app(title="botmanager")

    def _run(inbound: InboundRequest) -> PlainTextResponse:
        try:
            router = RequestRouter(
                settings=settings,
                backend=backend,
                request=inbound,
                output=OutputBuffer(echo=None),
            )
            output = router.run()
        except (BotManagerError, TelegramAdapterError) as exc:
            status = _error_status(exc)
            _LOGGER.warning("run failed with %s: %s", int(status), type(exc).__name__)
            return PlainTextResponse(_error_text(exc), status_code=status)
        return PlainTextResponse(output.drain())

    @app.api_route("/", methods=["GET", "POST"])
    async def handle(request: Request) -> PlainTextResponse:
        raw = await read_raw_request(request)
        return await run_in_threadpool(_run, inbound_request_from_http(raw))

    return app


def _error_status(exc: Exception) -> HTTPStatus:
    """Map run failures to HTTP status codes."""
    if isinstance(exc, InvalidActionError):
        return HTTPStatus.BAD_REQUEST
    if isinstance(exc, AccessDeniedError):
        return HTTPStatus.FORBIDDEN
    if isinstance(exc, InvalidWebhookError):
        return HTTPStatus.INTERNAL_SERVER_ERROR
    if isinstance(exc, TelegramAdapterError):
        return HTTPStatus.BAD_GATEWAY
    return HTTPStatus.INTERNAL_SERVER_ERROR


def _error_text(exc: Exception) -> str:
    """Return a response body that never exposes internal state."""
    if isinstance(exc, BotManagerError):
        return f"{exc}\n"
    return "Upstream platform failure\n"
