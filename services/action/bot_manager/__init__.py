"""Bot Manager request routing, access control and polling exports."""

from services.action.bot_manager.access_guard import (
    TELEGRAM_IP_RANGE,
    AccessGuard,
    effective_client_ip,
)
from services.action.bot_manager.domain import (
    Action,
    InboundRequest,
    PollSummary,
    UpdateLine,
)
from services.action.bot_manager.errors import (
    AccessDeniedError,
    BotManagerError,
    InvalidActionError,
    InvalidWebhookError,
)
from services.action.bot_manager.extras import apply_bot_extras, build_extras_plan
from services.action.bot_manager.output import OutputBuffer, stdout_echo
from services.action.bot_manager.poll_loop import (
    PollLoop,
    loop_duration,
    loop_interval,
    summarize_update,
)
from services.action.bot_manager.router import RequestRouter
from services.action.bot_manager.webhook_controller import (
    WebhookController,
    webhook_registration_url,
)

__all__ = [
    "AccessDeniedError",
    "AccessGuard",
    "Action",
    "BotManagerError",
    "InboundRequest",
    "InvalidActionError",
    "InvalidWebhookError",
    "OutputBuffer",
    "PollLoop",
    "PollSummary",
    "RequestRouter",
    "TELEGRAM_IP_RANGE",
    "UpdateLine",
    "WebhookController",
    "apply_bot_extras",
    "build_extras_plan",
    "effective_client_ip",
    "loop_duration",
    "loop_interval",
    "stdout_echo",
    "summarize_update",
    "webhook_registration_url",
]
