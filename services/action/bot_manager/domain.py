"""Domain contracts for one Bot Manager invocation."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from services.action.bot_manager.errors import InvalidActionError


class Action(str, Enum):
    """Requested run mode, parsed once from the caller's ``a`` token."""

    SET = "set"
    UNSET = "unset"
    RESET = "reset"
    HANDLE = "handle"

    @classmethod
    def parse(cls, token: str | None) -> "Action":
        """Return the action for ``token``; absent or empty means ``handle``."""
        if token is None or token == "":
            return cls.HANDLE
        try:
            return cls(token)
        except ValueError:
            raise InvalidActionError(f"Invalid action: {token}") from None

    @property
    def is_webhook_admin(self) -> bool:
        return self is not Action.HANDLE

    @property
    def deregisters(self) -> bool:
        return self in (Action.UNSET, Action.RESET)

    @property
    def registers(self) -> bool:
        return self in (Action.SET, Action.RESET)


class InboundRequest(BaseModel):
    """Read-only snapshot of the event that triggered one run.

    ``unattended`` marks runs started from a CLI or scheduler rather than an
    inbound HTTP request; such runs skip the secret and source checks unless
    validation is forced.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    action: str | None = None
    secret_echo: str | None = None
    loop_duration: str | int | None = None
    loop_interval: str | int | None = None
    remote_addr: str | None = None
    forwarded_for: str | None = None
    client_ip: str | None = None
    body: bytes = b""
    unattended: bool = False


class UpdateLine(BaseModel):
    """Summary of one processed update."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    subject_id: int
    text: str

    def render(self) -> str:
        return f"{self.subject_id}: {self.text}"


class PollSummary(BaseModel):
    """Outcome of one poll-and-process cycle."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    ok: bool
    updates: tuple[UpdateLine, ...] = ()
    error: str | None = None

    @property
    def updates_processed(self) -> int:
        return len(self.updates)
