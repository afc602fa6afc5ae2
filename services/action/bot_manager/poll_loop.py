"""Single-poll primitive, timed poll loop and loop parameter derivation."""

from __future__ import annotations

import re
import time
from datetime import datetime, timedelta
from threading import Event
from typing import Callable

from packages.botmanager_shared.logging import get_logger
from resources.adapters.telegram.adapter import BotBackend, TelegramAdapterError
from resources.adapters.telegram.entities import Message, Update
from services.action.bot_manager.domain import PollSummary, UpdateLine
from services.action.bot_manager.output import OutputBuffer

_LOGGER = get_logger(__name__)

DEFAULT_LOOP_DURATION_SECONDS = 604800
DEFAULT_LOOP_INTERVAL_SECONDS = 2
MIN_LOOP_INTERVAL_SECONDS = 1

_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_WHITESPACE = re.compile(r"\s+")


def _leading_int(raw: str | int) -> int:
    """Parse leading sign and digits leniently; anything else counts as 0."""
    if isinstance(raw, int):
        return raw
    match = _LEADING_INT.match(raw)
    return int(match.group(1)) if match else 0


def loop_duration(raw: str | int | None) -> int:
    """Seconds to keep polling: absent is 0, blank is seven days."""
    if raw is None:
        return 0
    if isinstance(raw, str) and raw.strip() == "":
        return DEFAULT_LOOP_DURATION_SECONDS
    return max(0, _leading_int(raw))


def loop_interval(raw: str | int | None) -> int:
    """Seconds to wait after each poll: default 2, minimum 1."""
    if raw is None or (isinstance(raw, str) and raw.strip() == ""):
        return DEFAULT_LOOP_INTERVAL_SECONDS
    return max(MIN_LOOP_INTERVAL_SECONDS, _leading_int(raw))


def normalize_text(text: str | None) -> str:
    """Trim and collapse whitespace runs to single spaces."""
    return _WHITESPACE.sub(" ", (text or "").strip())


def summarize_update(update: Update) -> UpdateLine:
    """Derive the subject id and short text shown for one update."""
    content = update.content
    if content is None:
        return UpdateLine(subject_id=0, text="Nothing")
    sender = content.from_user.id if content.from_user is not None else 0
    text = content.text if isinstance(content, Message) else content.query
    return UpdateLine(subject_id=sender, text=normalize_text(text))


class PollLoop:
    """Runs poll-and-process cycles against the backend's update fetcher."""

    def __init__(
        self,
        *,
        backend: BotBackend,
        output: OutputBuffer,
        clock: Callable[[], float] = time.time,
        sleeper: Callable[[float], None] = time.sleep,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._backend = backend
        self._output = output
        self._clock = clock
        self._sleeper = sleeper
        self._now = now

    def single_poll(self) -> PollSummary:
        """Fetch once and report the outcome; platform failures are not raised."""
        prefix = f"{self._now().strftime(_TIMESTAMP_FORMAT)} - "

        try:
            response = self._backend.fetch_updates()
        except TelegramAdapterError as exc:
            _LOGGER.warning("poll failed: %s", exc)
            summary = PollSummary(ok=False, error=str(exc))
        else:
            if response.ok:
                summary = PollSummary(
                    ok=True,
                    updates=tuple(summarize_update(update) for update in response.result),
                )
            else:
                summary = PollSummary(ok=False, error=response.print_error())

        if summary.ok:
            lines = [f"{prefix}Updates processed: {summary.updates_processed}"]
            lines.extend(entry.render() for entry in summary.updates)
        else:
            lines = [f"{prefix}Failed to fetch updates: {summary.error}"]
        self._output.write("".join(f"{line}\n" for line in lines))
        return summary

    def loop(
        self,
        duration_seconds: int,
        interval_seconds: int = DEFAULT_LOOP_INTERVAL_SECONDS,
        *,
        stop_event: Event | None = None,
    ) -> int:
        """Poll until the deadline passes, sleeping ``interval_seconds`` between.

        The deadline is only checked before each cycle, so the loop may run
        past it by up to one poll plus one interval. ``stop_event`` ends the
        loop early when set.

        Returns:
            Number of poll cycles run.
        """
        started = self._clock()
        deadline = started + duration_seconds
        until = (self._now() + timedelta(seconds=duration_seconds)).strftime(
            _TIMESTAMP_FORMAT
        )
        self._output.write_line(f"Looping getUpdates until {until}")
        _LOGGER.info(
            "polling every %ss for %ss", interval_seconds, duration_seconds
        )

        cycles = 0
        while self._clock() < deadline:
            if stop_event is not None and stop_event.is_set():
                break
            self.single_poll()
            cycles += 1
            if stop_event is not None:
                if stop_event.wait(interval_seconds):
                    break
            else:
                self._sleeper(interval_seconds)
        return cycles
