"""Secret and webhook-source access checks for inbound invocations."""

from __future__ import annotations

import hmac

from packages.botmanager_shared.config import BotSettings
from packages.botmanager_shared.ip_ranges import IPAddress, ip_in_range, parse_ip
from packages.botmanager_shared.logging import get_logger
from services.action.bot_manager.domain import InboundRequest
from services.action.bot_manager.errors import AccessDeniedError

_LOGGER = get_logger(__name__)

# Published source range of Telegram's webhook delivery servers.
TELEGRAM_IP_RANGE = "149.154.167.197-149.154.167.233"

_FALLBACK_REMOTE_ADDR = "0.0.0.0"


def effective_client_ip(request: InboundRequest) -> IPAddress | None:
    """Resolve the client IP, preferring proxy headers over the peer address.

    ``X-Forwarded-For`` then ``Client-IP`` win when their whole value parses as
    an IP. Trusting them means a direct caller can claim any source; this
    mirrors Telegram's own reverse-proxy guidance and is an accepted limit.
    """
    for header_value in (request.forwarded_for, request.client_ip):
        address = parse_ip(header_value)
        if address is not None:
            return address
    return parse_ip(request.remote_addr or _FALLBACK_REMOTE_ADDR)


class AccessGuard:
    """Validates the shared secret and the source of webhook deliveries."""

    def __init__(self, *, settings: BotSettings) -> None:
        self._settings = settings

    def validate_secret(self, request: InboundRequest, *, force: bool = False) -> None:
        """Require the echoed secret to match exactly.

        Unattended runs are trusted unless ``force`` is set.

        Raises:
            AccessDeniedError: On any mismatch, including a missing echo.
        """
        if request.unattended and not force:
            return

        echoed = request.secret_echo
        if echoed is None or not hmac.compare_digest(
            echoed.encode("utf-8"), self._settings.secret.encode("utf-8")
        ):
            _LOGGER.warning("rejected invocation with invalid secret")
            raise AccessDeniedError("Invalid access")

    def is_valid_webhook_source(self, request: InboundRequest) -> bool:
        """Return True when a delivery comes from an allowed source address."""
        if not self._settings.validate_request or request.unattended:
            return True

        address = effective_client_ip(request)
        if address is None:
            _LOGGER.warning("rejected delivery with unparseable client address")
            return False

        for allowed in (TELEGRAM_IP_RANGE, *self._settings.valid_ips):
            if ip_in_range(address, allowed):
                return True

        _LOGGER.warning("rejected delivery from non allow-listed source %s", address)
        return False
