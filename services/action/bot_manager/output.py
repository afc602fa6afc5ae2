"""Accumulating status output owned by one run."""

from __future__ import annotations

import sys
from typing import Callable

OutputEcho = Callable[[str], None]


def stdout_echo(text: str) -> None:
    """Write ``text`` to stdout immediately, without adding a newline."""
    sys.stdout.write(text)
    sys.stdout.flush()


class OutputBuffer:
    """Text log of status lines, mirrored to ``echo`` as it is written.

    Pass ``echo=None`` to capture output silently (tests and HTTP responses).
    """

    def __init__(self, *, echo: OutputEcho | None = stdout_echo) -> None:
        self._echo = echo
        self._chunks: list[str] = []

    def write(self, text: str) -> None:
        self._chunks.append(text)
        if self._echo is not None:
            self._echo(text)

    def write_line(self, line: str) -> None:
        self.write(f"{line}\n")

    def peek(self) -> str:
        """Return accumulated output without clearing it."""
        return "".join(self._chunks)

    def drain(self) -> str:
        """Return accumulated output and clear the buffer."""
        output = self.peek()
        self._chunks.clear()
        return output
