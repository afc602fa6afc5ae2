"""Bot API entity models consumed by Bot Manager.

Only the fields the manager reads are typed; everything else a Bot API payload
carries is preserved as model extras so update processors see the full object.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TelegramUser(BaseModel):
    """Sender of a message or inline query."""

    model_config = ConfigDict(frozen=True, extra="allow")

    id: int
    is_bot: bool = False
    first_name: str = ""
    username: str | None = None


class Message(BaseModel):
    """Message, edited message or channel post."""

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    message_id: int
    from_user: TelegramUser | None = Field(default=None, alias="from")
    text: str | None = None


class InlineQuery(BaseModel):
    """Incoming inline query."""

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    id: str
    from_user: TelegramUser = Field(alias="from")
    query: str = ""


class ChosenInlineResult(BaseModel):
    """Inline result chosen by a user."""

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    result_id: str
    from_user: TelegramUser = Field(alias="from")
    query: str = ""


UpdateContent = Message | InlineQuery | ChosenInlineResult


class Update(BaseModel):
    """One Bot API update; at most one content field is populated."""

    model_config = ConfigDict(frozen=True, extra="allow")

    update_id: int
    message: Message | None = None
    edited_message: Message | None = None
    channel_post: Message | None = None
    edited_channel_post: Message | None = None
    inline_query: InlineQuery | None = None
    chosen_inline_result: ChosenInlineResult | None = None

    @property
    def content(self) -> UpdateContent | None:
        """Return the typed content object, or ``None`` for other update kinds."""
        for candidate in (
            self.message,
            self.edited_message,
            self.channel_post,
            self.edited_channel_post,
            self.inline_query,
            self.chosen_inline_result,
        ):
            if candidate is not None:
                return candidate
        return None


class ServerResponse(BaseModel):
    """Decoded Bot API response envelope."""

    model_config = ConfigDict(frozen=True, extra="allow")

    ok: bool
    result: Any = None
    description: str | None = None
    error_code: int | None = None

    def describe(self) -> str:
        """Return the platform's status description, or an empty string."""
        return self.description or ""

    def print_error(self) -> str:
        """Return a one-line error rendering for "not ok" responses."""
        if self.error_code is None:
            return self.describe()
        return f"Error {self.error_code}: {self.describe()}"


class UpdatesResponse(ServerResponse):
    """``getUpdates`` response with typed update results."""

    result: list[Update] = Field(default_factory=list)
